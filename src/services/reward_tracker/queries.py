# src/services/reward_tracker/queries.py
"""
GraphQL запросы к индексатору Acki Nacki.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.common.constants import MSG_TYPE_INTERNAL_IN


ACCOUNT_BALANCE_QUERY = """
query($a: String!) {
  blockchain {
    account(address: $a) {
      info {
        balance_other { currency value }
      }
    }
  }
}
"""

ACCOUNT_MESSAGES_QUERY = """
query($a: String!, $first: Int!, $after: String) {
  blockchain {
    account(address: $a) {
      messages(first: $first, msg_type: [%s], after: $after) {
        edges {
          node {
            id
            created_at
            src
            value_other { currency value }
            body
          }
        }
        pageInfo {
          endCursor
          hasNextPage
        }
      }
    }
  }
}
""" % MSG_TYPE_INTERNAL_IN


@dataclass
class CodeHashBatchQuery:
    """
    Один мультиплексированный запрос code_hash для пачки адресов.

    Каждому адресу соответствует алиас a<batch>_<index> и переменная $v<index>.
    Ответ разбирается по тому же упорядоченному списку алиасов, поэтому
    адреса в текст запроса не подставляются.
    """

    batch_index: int
    addresses: list[str]
    aliases: list[str] = field(init=False)

    def __post_init__(self) -> None:
        self.aliases = [f"a{self.batch_index}_{i}" for i in range(len(self.addresses))]

    @property
    def query(self) -> str:
        params = ", ".join(f"$v{i}: String!" for i in range(len(self.addresses)))
        fields = "\n".join(
            f"    {alias}: account(address: $v{i}) {{ info {{ address code_hash }} }}"
            for i, alias in enumerate(self.aliases)
        )
        return f"query({params}) {{\n  blockchain {{\n{fields}\n  }}\n}}"

    @property
    def variables(self) -> dict[str, str]:
        return {f"v{i}": address for i, address in enumerate(self.addresses)}

    def parse(self, data: dict[str, Any]) -> dict[str, str | None]:
        """Сопоставить адреса с code_hash из ответа (None, если аккаунта или хэша нет)."""
        blockchain = data.get("blockchain") or {}
        result: dict[str, str | None] = {}
        for address, alias in zip(self.addresses, self.aliases):
            account = blockchain.get(alias) or {}
            info = account.get("info") or {}
            result[address] = info.get("code_hash") or None
        return result


def build_code_hash_batches(addresses: list[str], batch_size: int) -> list[CodeHashBatchQuery]:
    """Разбить адреса на пачки фиксированного размера."""
    return [
        CodeHashBatchQuery(batch_index=n, addresses=addresses[start:start + batch_size])
        for n, start in enumerate(range(0, len(addresses), batch_size))
    ]
