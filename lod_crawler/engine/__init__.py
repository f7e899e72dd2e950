"""Engine components: rewrite → admit → fetch → filter → aggregate."""

from .aggregator import TripleAggregator
from .facts import Fact, TermKind, TripleStore
from .fetcher import LodFetcher
from .filters import accept_fact, compile_filter, equivalence_target
from .frontier import EquivalenceFrontier
from .identifiers import extract_domain, extract_identifier
from .rewrite import RewriteChain, RewriteRule
from .streams import Broadcast, Stream, Subscription

__all__ = [
    "Broadcast",
    "EquivalenceFrontier",
    "Fact",
    "LodFetcher",
    "RewriteChain",
    "RewriteRule",
    "Stream",
    "Subscription",
    "TermKind",
    "TripleAggregator",
    "TripleStore",
    "accept_fact",
    "compile_filter",
    "equivalence_target",
    "extract_domain",
    "extract_identifier",
]
