"""Core data models shared across dtsbundle components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

# ModuleId -> declaration body, in concatenation order.
DeclarationMap = Dict[str, str]


class BasePolicy(str, Enum):
    """Directory a path is made relative to before it becomes a module name."""

    ROOT = "root"
    SCRATCH = "scratch"
    CWD = "cwd"


class ShakePolicy(str, Enum):
    """How the module graph is pruned before serialisation."""

    OFF = "off"
    EXPORT_ONLY = "exportOnly"
    ALL_IMPORTS = "allImports"


@dataclass
class DeclarationFile:
    """A per-file declaration emitted by the compiler."""

    path: str
    content: str


@dataclass
class PackageDescriptor:
    """Subset of package.json used while bundling."""

    name: str
    version: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class AggregationError(RuntimeError):
    """Raised when declarations cannot be combined into a bundle."""
