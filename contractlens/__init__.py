"""contractlens: typo-tolerant parsing of contract and part queries."""

__version__ = "0.1.0"

from .config import ContractLensConfig  # noqa: E402
from .core import ParsedQuery, PipelineResult, QueryPipeline  # noqa: E402

__all__ = [
    "ContractLensConfig",
    "ParsedQuery",
    "PipelineResult",
    "QueryPipeline",
    "__version__",
]
