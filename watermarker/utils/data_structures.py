from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class AlignXEnum(StrEnum):
    LEFT = 'left'
    CENTER = 'center'
    RIGHT = 'right'

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in {c.value for c in cls}


class AlignYEnum(StrEnum):
    TOP = 'top'
    MIDDLE = 'middle'
    BOTTOM = 'bottom'

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in {c.value for c in cls}


class OutputFormatEnum(StrEnum):
    JPG = 'jpg'
    PNG = 'png'
    GIF = 'gif'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            value = value.lower()
            if value == 'jpeg':
                return cls.JPG
            for member in cls:
                if member.value == value:
                    return member
        return None

    @property
    def pillow_format(self) -> str:
        return {'jpg': 'JPEG', 'png': 'PNG', 'gif': 'GIF'}[self.value]

    @property
    def extension(self) -> str:
        return self.value

    @property
    def content_type(self) -> str:
        return {'jpg': 'image/jpeg', 'png': 'image/png', 'gif': 'image/gif'}[self.value]


class DimensionUnitEnum(StrEnum):
    AUTO = 'auto'
    PIXELS = 'pixels'
    PERCENT = 'percent'


@dataclass(frozen=True)
class Dimension:
    unit: DimensionUnitEnum
    value: float = 0

    @classmethod
    def auto(cls) -> Dimension:
        return cls(DimensionUnitEnum.AUTO)

    @classmethod
    def pixels(cls, value: float) -> Dimension:
        return cls(DimensionUnitEnum.PIXELS, value)

    @classmethod
    def percent(cls, value: float) -> Dimension:
        return cls(DimensionUnitEnum.PERCENT, value)

    @property
    def is_auto(self) -> bool:
        return self.unit == DimensionUnitEnum.AUTO

    def resolve(self, base_length: float) -> float:
        """Convert to pixels, percentages are taken of ``base_length``."""
        if self.unit == DimensionUnitEnum.PERCENT:
            return base_length * self.value / 100
        if self.unit == DimensionUnitEnum.PIXELS:
            return self.value
        raise ValueError('Auto dimension has no fixed length')


@dataclass(frozen=True)
class WatermarkConfig:
    opacity: float = 0.3
    width: Dimension = field(default_factory=lambda: Dimension.percent(80))
    height: Dimension = field(default_factory=Dimension.auto)
    align_x: AlignXEnum = AlignXEnum.CENTER
    align_y: AlignYEnum = AlignYEnum.MIDDLE
    offset_x: Dimension = field(default_factory=lambda: Dimension.pixels(0))
    offset_y: Dimension = field(default_factory=lambda: Dimension.pixels(0))
    output_format: OutputFormatEnum = OutputFormatEnum.JPG
    quality: int = 100


@dataclass
class PlacementResult:
    target_width: float
    target_height: float
    x: float
    y: float


DEFAULT_OPACITY = 0.3
DEFAULT_QUALITY = 100
# Pillow format names accepted as input
IMAGE_FORMATS = {'PNG', 'GIF', 'JPEG'}
IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif'}
OPTION_KEYS = (
    'opacity',
    'width',
    'height',
    'align_x',
    'align_y',
    'offset_x',
    'offset_y',
    'output_format',
    'quality',
    'debug',
    'destination_path',
    'destination_filename',
    'backup_path',
)
