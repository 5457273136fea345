"""
Data Models for the Property Site Generator

Dataclass definitions for submitted properties, contacts, photos and published sites.
Submissions arrive as the camelCase JSON the form posts; ``from_dict`` adapts them.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from propertysite.utils.formatting import parse_number


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    text = _text(value)
    return text or None


@dataclass(frozen=True)
class PropertyRecord:
    """The property being advertised."""

    address: str
    city: str
    state: str
    zip: str
    price: float
    bedrooms: float
    bathrooms: float
    sqft: float
    year_built: int
    description: str
    property_type: Optional[str] = None
    lot_size: Optional[str] = None
    mls_number: Optional[str] = None

    # Neighborhood section
    neighborhood: Optional[str] = None
    schools: Optional[str] = None
    amenities: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PropertyRecord":
        """Build from the form's ``property`` object."""
        return cls(
            address=_text(data.get("address")),
            city=_text(data.get("city")),
            state=_text(data.get("state")),
            zip=_text(data.get("zip")),
            price=parse_number(data.get("price")),
            bedrooms=parse_number(data.get("bedrooms")),
            bathrooms=parse_number(data.get("bathrooms")),
            sqft=parse_number(data.get("sqft")),
            year_built=int(parse_number(data.get("yearBuilt"))),
            description=_text(data.get("description")),
            property_type=_optional_text(data.get("propertyType")),
            lot_size=_optional_text(data.get("lotSize")),
            mls_number=_optional_text(data.get("mlsNumber")),
            neighborhood=_optional_text(data.get("neighborhood")),
            schools=_optional_text(data.get("schools")),
            amenities=_optional_text(data.get("amenities")),
        )

    @property
    def full_address(self) -> str:
        """Single-line address, e.g. "123 Main St, Springfield, IL 62701"."""
        region = " ".join(part for part in (self.state, self.zip) if part)
        return ", ".join(part for part in (self.address, self.city, region) if part)

    @property
    def has_neighborhood_info(self) -> bool:
        return any((self.neighborhood, self.schools, self.amenities))


@dataclass(frozen=True)
class ContactProfile:
    """A realtor or loan officer shown on the site.

    ``license`` holds the real-estate license for a realtor and the NMLS
    registration number for a loan officer.
    """

    label: str
    name: str
    company: str
    license: str
    phone: str
    email: str
    photo: Optional[str] = None
    license_label: str = "License #"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], label: str, license_key: str = "license") -> "ContactProfile":
        return cls(
            label=label,
            name=_text(data.get("name")),
            company=_text(data.get("company")),
            license=_text(data.get(license_key) or data.get("license")),
            phone=_text(data.get("phone")),
            email=_text(data.get("email")),
            photo=_optional_text(data.get("photo")),
            license_label="NMLS #" if license_key == "nmls" else "License #",
        )

    def with_photo(self, photo: Optional[str]) -> "ContactProfile":
        """Return a copy pointing at a different photo reference."""
        return replace(self, photo=photo)


@dataclass(frozen=True)
class PhotoAsset:
    """A gallery photo: either an external URL or a staged upload path."""

    url: Optional[str] = None
    path: Optional[str] = None
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["PhotoAsset"]:
        """Parse one photo entry; returns None for entries with no source."""
        if isinstance(data, str):
            data = {"url": data}
        if not isinstance(data, dict):
            return None
        url = _optional_text(data.get("url"))
        path = _optional_text(data.get("path"))
        if not url and not path:
            return None
        return cls(url=url, path=None if url else path, label=_optional_text(data.get("label")))

    @property
    def is_upload(self) -> bool:
        return self.url is None and self.path is not None

    @property
    def src(self) -> str:
        """Reference used in the rendered ``<img>`` tag."""
        return self.url or self.path or ""


@dataclass(frozen=True)
class Testimonial:
    """A client quote."""

    quote: str
    author: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Testimonial"]:
        if isinstance(data, str):
            data = {"quote": data}
        if not isinstance(data, dict):
            return None
        quote = _text(data.get("quote") or data.get("text"))
        if not quote:
            return None
        return cls(quote=quote, author=_optional_text(data.get("author") or data.get("name")))


@dataclass(frozen=True)
class SiteSubmission:
    """Everything needed to render one property site."""

    property: PropertyRecord
    realtor: ContactProfile
    loan_officer: ContactProfile
    photos: Tuple[PhotoAsset, ...] = ()
    testimonials: Tuple[Testimonial, ...] = ()
    show_neighborhood: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SiteSubmission":
        """Build from the JSON body posted to /api/generate or /api/preview."""
        photos = (PhotoAsset.from_dict(item) for item in data.get("photos") or [])
        testimonials = (Testimonial.from_dict(item) for item in data.get("testimonials") or [])
        return cls(
            property=PropertyRecord.from_dict(data.get("property") or {}),
            realtor=ContactProfile.from_dict(data.get("realtor") or {}, "Realtor", "license"),
            loan_officer=ContactProfile.from_dict(data.get("loanOfficer") or {}, "Loan Officer", "nmls"),
            photos=tuple(p for p in photos if p is not None),
            testimonials=tuple(t for t in testimonials if t is not None),
            show_neighborhood=bool(data.get("showNeighborhood", False)),
        )


@dataclass
class PublishedSite:
    """A property site living under ``properties/<slug>/`` in the hosted repo."""

    slug: str
    url: str
    path: str = ""


@dataclass
class SiteFile:
    """One file to commit: repository-relative path and raw bytes."""

    path: str
    content: bytes = field(repr=False)
