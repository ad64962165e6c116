"""IIIF Image API 2.x image information (info.json) data models.

These models mirror the info.json document served at
``{host}/{prefix}*/{identifier}/info.json``. They are immutable once built.

For parsing raw JSON, use pyiiif.formats.info.InfoParser.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pyiiif.errors import InfoParseError


def _require_int(data: Dict[str, Any], key: str, where: str) -> int:
    """Return a required integer field or raise InfoParseError."""
    if key not in data:
        raise InfoParseError(f"{where}: missing required field '{key}'")
    value = data[key]
    # bool is an int subclass but never a valid dimension
    if not isinstance(value, int) or isinstance(value, bool):
        raise InfoParseError(f"{where}: field '{key}' must be an integer, got {value!r}")
    return value


def _optional_int(data: Dict[str, Any], key: str, where: str) -> Optional[int]:
    if data.get(key) is None:
        return None
    return _require_int(data, key, where)


def _as_list(value: Any) -> List[Any]:
    """Normalize a JSON-LD value that may be single or repeated."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _str_list(value: Any, where: str) -> Tuple[str, ...]:
    items = _as_list(value)
    if not all(isinstance(item, str) for item in items):
        raise InfoParseError(f"{where}: expected a list of strings, got {value!r}")
    return tuple(items)


@dataclass(frozen=True)
class InfoSize:
    """A width/height pair the server can deliver for the full image."""

    width: int
    height: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InfoSize":
        """Create InfoSize from dictionary."""
        if not isinstance(data, dict):
            raise InfoParseError(f"sizes: expected an object, got {data!r}")
        return cls(
            width=_require_int(data, 'width', 'sizes'),
            height=_require_int(data, 'height', 'sizes'),
        )


@dataclass(frozen=True)
class Tile:
    """Tile description: tile dimensions and the scale factors offered.

    ``height`` defaults to ``width`` for square tiles.
    """

    width: int
    scale_factors: Tuple[int, ...] = ()
    height: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tile":
        """Create Tile from dictionary."""
        if not isinstance(data, dict):
            raise InfoParseError(f"tiles: expected an object, got {data!r}")

        width = _require_int(data, 'width', 'tiles')
        height = data.get('height', width)
        if not isinstance(height, int) or isinstance(height, bool):
            raise InfoParseError(f"tiles: field 'height' must be an integer, got {height!r}")

        scale_factors = data.get('scaleFactors', [])
        if not isinstance(scale_factors, list) or not all(
            isinstance(n, int) and not isinstance(n, bool) for n in scale_factors
        ):
            raise InfoParseError("tiles: 'scaleFactors' must be a list of integers")

        return cls(width=width, scale_factors=tuple(scale_factors), height=height)


@dataclass(frozen=True)
class Attribution:
    """Attribution text, optionally language tagged."""

    value: str
    language: Optional[str] = None

    @classmethod
    def from_value(cls, data: Any) -> "Attribution":
        """Create Attribution from a plain string or a JSON-LD value object."""
        if isinstance(data, str):
            return cls(value=data)
        if isinstance(data, dict) and isinstance(data.get('@value'), str):
            return cls(value=data['@value'], language=data.get('@language'))
        raise InfoParseError(f"attribution: unsupported value {data!r}")


@dataclass(frozen=True)
class Service:
    """Service reference (e.g. on a logo or in the service list)."""

    id: str = ''
    context: Optional[str] = None
    profile: Optional[str] = None
    physical_scale: Optional[float] = None
    physical_units: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Service":
        """Create Service from dictionary."""
        if not isinstance(data, dict):
            raise InfoParseError(f"service: expected an object, got {data!r}")
        return cls(
            id=data.get('@id') or data.get('id', ''),
            context=data.get('@context'),
            profile=data.get('profile'),
            physical_scale=data.get('physicalScale'),
            physical_units=data.get('physicalUnits'),
        )


@dataclass(frozen=True)
class Logo:
    """Logo image of the providing institution."""

    id: str
    service: Optional[Service] = None

    @classmethod
    def from_value(cls, data: Any) -> "Logo":
        """Create Logo from a URI string or an object with a service."""
        if isinstance(data, str):
            return cls(id=data)
        if isinstance(data, dict):
            service_data = data.get('service')
            return cls(
                id=data.get('@id') or data.get('id', ''),
                service=Service.from_dict(service_data) if service_data else None,
            )
        raise InfoParseError(f"logo: unsupported value {data!r}")


@dataclass(frozen=True)
class Profile:
    """Capabilities the server offers beyond its compliance level."""

    formats: Tuple[str, ...] = ()
    qualities: Tuple[str, ...] = ()
    supports: Tuple[str, ...] = ()
    max_width: Optional[int] = None
    max_height: Optional[int] = None
    max_area: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        """Create Profile from the object part of the profile list."""
        return cls(
            formats=_str_list(data.get('formats'), 'profile.formats'),
            qualities=_str_list(data.get('qualities'), 'profile.qualities'),
            supports=_str_list(data.get('supports'), 'profile.supports'),
            max_width=_optional_int(data, 'maxWidth', 'profile'),
            max_height=_optional_int(data, 'maxHeight', 'profile'),
            max_area=_optional_int(data, 'maxArea', 'profile'),
        )


@dataclass(frozen=True)
class ImageInfo:
    """IIIF Image API 2.x image information document."""

    id: str
    width: int
    height: int
    context: str = ''
    protocol: str = 'http://iiif.io/api/image'
    sizes: Tuple[InfoSize, ...] = ()
    tiles: Tuple[Tile, ...] = ()
    attribution: Tuple[Attribution, ...] = ()
    logo: Optional[Logo] = None
    license: Tuple[str, ...] = ()
    compliance: Optional[str] = None
    profile: Profile = field(default_factory=Profile)
    service: Tuple[Service, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageInfo":
        """Create ImageInfo from a parsed info.json dictionary.

        Raises:
            InfoParseError: If required fields are missing or ill-typed
        """
        if not isinstance(data, dict):
            raise InfoParseError(f"info.json must be an object, got {type(data).__name__}")

        image_id = data.get('@id')
        if not isinstance(image_id, str):
            raise InfoParseError("info.json: missing required field '@id'")

        compliance, profile = cls._parse_profile(data.get('profile'))
        logo = data.get('logo')

        return cls(
            id=image_id,
            width=_require_int(data, 'width', 'info.json'),
            height=_require_int(data, 'height', 'info.json'),
            context=data.get('@context', ''),
            protocol=data.get('protocol', 'http://iiif.io/api/image'),
            sizes=tuple(InfoSize.from_dict(s) for s in _as_list(data.get('sizes'))),
            tiles=tuple(Tile.from_dict(t) for t in _as_list(data.get('tiles'))),
            attribution=tuple(
                Attribution.from_value(a) for a in _as_list(data.get('attribution'))
            ),
            logo=Logo.from_value(logo) if logo else None,
            license=_str_list(data.get('license'), 'license'),
            compliance=compliance,
            profile=profile,
            service=tuple(Service.from_dict(s) for s in _as_list(data.get('service'))),
        )

    @staticmethod
    def _parse_profile(value: Any) -> Tuple[Optional[str], Profile]:
        """Split the profile entry into compliance URI and capabilities.

        The profile is a compliance level URI, optionally followed by
        objects listing extra formats, qualities and features.
        """
        compliance = None
        profile = Profile()
        for item in _as_list(value):
            if isinstance(item, str):
                if compliance is None:
                    compliance = item
            elif isinstance(item, dict):
                extra = Profile.from_dict(item)
                profile = Profile(
                    formats=profile.formats + extra.formats,
                    qualities=profile.qualities + extra.qualities,
                    supports=profile.supports + extra.supports,
                    max_width=extra.max_width if extra.max_width is not None else profile.max_width,
                    max_height=extra.max_height if extra.max_height is not None else profile.max_height,
                    max_area=extra.max_area if extra.max_area is not None else profile.max_area,
                )
            else:
                raise InfoParseError(f"profile: unsupported entry {item!r}")
        return compliance, profile

    @property
    def formats(self) -> Tuple[str, ...]:
        """Formats offered in addition to those of the compliance level."""
        return self.profile.formats

    @property
    def qualities(self) -> Tuple[str, ...]:
        """Qualities offered in addition to those of the compliance level."""
        return self.profile.qualities

    @property
    def supports(self) -> Tuple[str, ...]:
        """Features supported in addition to those of the compliance level."""
        return self.profile.supports
