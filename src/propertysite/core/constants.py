"""
Shared Constants for the Property Site Generator

Contains all constant values used across the application.
"""

from typing import Dict, FrozenSet, List

# Hosted repository layout
PROPERTIES_DIR: str = "properties"
SITE_INDEX_FILE: str = "index.html"
SITE_IMAGES_DIR: str = "images"

# Git tree entry for a regular file
BLOB_MODE: str = "100644"

# Upload limits
MAX_UPLOAD_FILES: int = 20
MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
UPLOAD_FIELD: str = "photos"
UPLOAD_URL_PREFIX: str = "/uploads/"

ALLOWED_IMAGE_EXTENSIONS: FrozenSet[str] = frozenset(
    {".jpeg", ".jpg", ".png", ".gif", ".webp"}
)
ALLOWED_IMAGE_MIMETYPES: FrozenSet[str] = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
)

# Submission fields that must be present before generating a site
REQUIRED_FIELDS: List[str] = [
    "property.address",
    "property.city",
    "property.state",
    "property.zip",
    "property.price",
    "property.bedrooms",
    "property.bathrooms",
    "property.sqft",
    "property.yearBuilt",
    "property.description",
    "realtor.name",
    "realtor.company",
    "realtor.license",
    "realtor.phone",
    "realtor.email",
    "loanOfficer.name",
    "loanOfficer.company",
    "loanOfficer.nmls",
    "loanOfficer.phone",
    "loanOfficer.email",
]

# Placeholder values used to fill gaps in a preview
PREVIEW_PROPERTY: Dict[str, object] = {
    "address": "123 Main St",
    "city": "City",
    "state": "ST",
    "zip": "00000",
    "price": 500000,
    "bedrooms": 3,
    "bathrooms": 2,
    "sqft": 2000,
    "yearBuilt": 2000,
    "description": "Beautiful property description goes here.",
}

PREVIEW_REALTOR: Dict[str, object] = {
    "name": "Realtor Name",
    "company": "Realty Company",
    "license": "RE123456",
    "phone": "(555) 123-4567",
    "email": "realtor@example.com",
}

PREVIEW_LOAN_OFFICER: Dict[str, object] = {
    "name": "Loan Officer Name",
    "company": "Lending Company",
    "nmls": "123456",
    "phone": "(555) 987-6543",
    "email": "lo@example.com",
}

PREVIEW_PHOTOS: List[Dict[str, str]] = [
    {
        "url": "https://images.unsplash.com/photo-1568605114967-8130f3a36994?w=800",
        "label": "Front Exterior",
    },
]

# QR code image service used in the share block
QR_CODE_URL: str = "https://api.qrserver.com/v1/create-qr-code/"

# Relaxed policy so the form works behind hosted dev proxies
CONTENT_SECURITY_POLICY: str = (
    "default-src 'self'; script-src 'self' 'unsafe-inline' 'unsafe-eval'; "
    "style-src 'self' 'unsafe-inline'; img-src 'self' data: https: blob:; "
    "font-src 'self' https:; connect-src 'self' https:;"
)
