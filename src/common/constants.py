# src/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class MemberStatus(str, Enum):
    """Статусы участника канала в ответе getChatMember."""
    CREATOR = "creator"
    ADMINISTRATOR = "administrator"
    MEMBER = "member"
    RESTRICTED = "restricted"
    LEFT = "left"
    KICKED = "kicked"


# Статусы, которые считаются подпиской на премиум-канал
PREMIUM_MEMBER_STATUSES: frozenset[str] = frozenset({
    MemberStatus.CREATOR.value,
    MemberStatus.ADMINISTRATOR.value,
    MemberStatus.MEMBER.value,
})

# Тип входящих внутренних сообщений в схеме индексатора
MSG_TYPE_INTERNAL_IN = "IntIn"
