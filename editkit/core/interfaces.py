"""
Abstract interfaces and data types for editkit.
Defines the edit request model and the contracts between components.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum


class FitMode(Enum):
    """How an image is scaled into target dimensions."""
    COVER = "cover"
    CONTAIN = "contain"
    FILL = "fill"
    INSIDE = "inside"
    OUTSIDE = "outside"


@dataclass
class ImageDimensions:
    """Represents image dimensions with utility properties."""
    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height > 0 else 0

    @property
    def is_portrait(self) -> bool:
        return self.height > self.width

    @property
    def is_landscape(self) -> bool:
        return self.width > self.height


@dataclass
class OverlayDimensions:
    """Target overlay size; None means the axis is left to the fit mode."""
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def is_set(self) -> bool:
        return self.width is not None and self.height is not None


def _positive_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    number = int(value)
    return number if number > 0 else None


@dataclass
class ResizeSpec:
    """Parameters of a resize edit."""
    fit: FitMode = FitMode.COVER
    width: Optional[int] = None
    height: Optional[int] = None
    background: Any = None
    without_enlargement: bool = False

    def __post_init__(self):
        if not isinstance(self.fit, FitMode):
            self.fit = FitMode(self.fit)
        self.width = _positive_int(self.width)
        self.height = _positive_int(self.height)

    @classmethod
    def from_value(cls, value: Any) -> "ResizeSpec":
        """Build from a resize edit value: a spec, a mapping, or a bare width."""
        if isinstance(value, ResizeSpec):
            return value
        if value is None:
            return cls()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls(width=int(value))
        if not isinstance(value, Mapping):
            raise TypeError(f"Invalid resize value: {value!r}")
        return cls(
            fit=value.get("fit", FitMode.COVER.value),
            width=value.get("width"),
            height=value.get("height"),
            background=value.get("background"),
            without_enlargement=bool(value.get("withoutEnlargement", False)),
        )

    @property
    def has_dimensions(self) -> bool:
        return self.width is not None or self.height is not None


OVERLAY_FIELDS = ("bucket", "key", "wRatio", "hRatio", "rotate", "alpha")


@dataclass
class OverlaySpec:
    """A single overlay image and how to size it against the primary image."""
    bucket: str
    key: str
    w_ratio: Any = None
    h_ratio: Any = None
    rotate: bool = False
    alpha: Any = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OverlaySpec":
        if not isinstance(data, Mapping):
            raise TypeError(f"Invalid overlay value: {data!r}")
        return cls(
            bucket=data.get("bucket"),
            key=data.get("key"),
            w_ratio=data.get("wRatio"),
            h_ratio=data.get("hRatio"),
            rotate=bool(data.get("rotate", False)),
            alpha=data.get("alpha"),
            extras={k: v for k, v in data.items() if k not in OVERLAY_FIELDS},
        )


@dataclass
class CompositeSpec:
    """Several overlays composited in one call, in declared order."""
    images: List[OverlaySpec] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompositeSpec":
        if not isinstance(data, Mapping):
            raise TypeError(f"Invalid composite value: {data!r}")
        return cls(images=[OverlaySpec.from_dict(item) for item in data.get("images") or []])


@dataclass
class CompositeLayer:
    """A resolved overlay ready for compositing."""
    input: bytes
    gravity: str = "centre"
    top: Optional[int] = None
    left: Optional[int] = None
    blend: str = "over"

    @classmethod
    def from_overlay(cls, spec: OverlaySpec, data: bytes) -> "CompositeLayer":
        return cls(
            input=data,
            gravity=spec.extras.get("gravity", "centre"),
            top=spec.extras.get("top"),
            left=spec.extras.get("left"),
            blend=spec.extras.get("blend", "over"),
        )


@dataclass(frozen=True)
class Edit:
    """One named edit and its parameters."""
    name: str
    params: Any = None


class EditRequest:
    """
    Ordered sequence of edits.

    Edits apply cumulatively, so the order given here is the order applied.
    Instances are never mutated by the pipeline.
    """

    def __init__(self, edits: Iterable[Union[Edit, Tuple[str, Any]]] = ()):
        self._edits: Tuple[Edit, ...] = tuple(
            e if isinstance(e, Edit) else Edit(*e) for e in edits
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "EditRequest":
        return cls(Edit(name, params) for name, params in mapping.items())

    @classmethod
    def coerce(cls, edits: Union["EditRequest", Mapping[str, Any], Iterable]) -> "EditRequest":
        if isinstance(edits, EditRequest):
            return edits
        if isinstance(edits, Mapping):
            return cls.from_mapping(edits)
        return cls(edits)

    def __iter__(self) -> Iterator[Edit]:
        return iter(self._edits)

    def __len__(self) -> int:
        return len(self._edits)

    def __repr__(self) -> str:
        return f"EditRequest({list(self._edits)!r})"

    @property
    def names(self) -> List[str]:
        return [e.name for e in self._edits]

    def get(self, name: str) -> Optional[Edit]:
        for edit in self._edits:
            if edit.name == name:
                return edit
        return None

    @property
    def resize(self) -> Optional[ResizeSpec]:
        edit = self.get("resize")
        return ResizeSpec.from_value(edit.params) if edit is not None else None

    def with_default_resize(self, fit: FitMode = FitMode.INSIDE) -> "EditRequest":
        """Return a request guaranteed to carry a resize edit."""
        if self.get("resize") is not None:
            return self
        return EditRequest((Edit("resize", {"fit": fit.value}),) + self._edits)


class IObjectFetcher(ABC):
    """Interface for retrieving overlay bytes from storage."""

    @abstractmethod
    async def fetch(self, bucket: str, key: str) -> bytes:
        """Fetch object bytes; raises FetchError on failure."""
        pass


class IOverlayResolver(ABC):
    """Interface for turning an overlay spec into composite-ready bytes."""

    @abstractmethod
    async def resolve(
        self,
        spec: OverlaySpec,
        resized: ImageDimensions,
        original: ImageDimensions,
        fit: FitMode
    ) -> bytes:
        """Fetch, size, rotate and mask one overlay."""
        pass


class IImageProcessor(ABC):
    """Interface for the image processing entry point."""

    @abstractmethod
    async def process(
        self,
        image: bytes,
        edits: Optional[Union[EditRequest, Mapping[str, Any]]] = None,
        output_format: Optional[str] = None
    ) -> str:
        """Apply edits and return the result as a base64 string."""
        pass
