"""Chain Link Rules — pure reconciliation of token -> chain links.

Invariants:
    - A token maps to at most one chain; a token pair resolving to two chains raises
      ChainInconsistentError (never silently accepted)
    - Rules never touch the store; the resolver passes in what it read

Design Decisions:
    - Raise instead of returning an error dict: integrity violations are fatal,
      the shell does not branch on them
"""

from typing import Sequence

from surveillance_pseudonym.core.domain_types import ChainId
from surveillance_pseudonym.core.errors import ChainInconsistentError
from surveillance_pseudonym.core.repository_protocols import LinkLike


def chain_id_of(links: Sequence[LinkLike]) -> ChainId:
    """Common chain id of non-empty links."""
    chain_id = links[0].chain_id
    if any(link.chain_id != chain_id for link in links[1:]):
        raise ChainInconsistentError(
            "Inconsistent database: different chain ids found for one pseudonym pair",
        )
    return ChainId(chain_id)


def missing_tokens(
    tokens: Sequence[bytes], links: Sequence[LinkLike],
) -> list[bytes]:
    """Tokens of the request that have no link yet, in request order."""
    known = {link.token_hash for link in links}
    return [token for token in tokens if token not in known]
