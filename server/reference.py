"""
Immutable reference data injected into the response formatters

Built once at startup from server.utils.constants and stored on
app.state.reference; routes receive it through get_reference().
"""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from server.utils.constants import (
    COUNTRY_COORDINATES,
    DEPARTMENTS,
    UNKNOWN_COORDINATES,
)


class Coordinates(BaseModel):
    """Map marker position for a country"""
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    code: str


class ReferenceData(BaseModel):
    """Departments and country coordinates, read-only after construction"""
    model_config = ConfigDict(frozen=True)

    home_country: str
    departments: Tuple[str, ...]
    country_coordinates: Dict[str, Coordinates]
    unknown_coordinates: Coordinates

    def coordinates_for(self, country: Optional[str]) -> Coordinates:
        """Coordinates for a known country name, the unknown sentinel otherwise"""
        if country is None:
            return self.unknown_coordinates
        return self.country_coordinates.get(country, self.unknown_coordinates)

    def canonical_department(self, region: Optional[str]) -> Optional[str]:
        """Known department spelling for a region, matched case-insensitively

        Regions that match no department are returned stripped but unchanged;
        blank regions become None.
        """
        if region is None:
            return None
        name = region.strip()
        if not name:
            return None
        folded = name.casefold()
        for department in self.departments:
            if department.casefold() == folded:
                return department
        return name


def load_reference_data(home_country: str) -> ReferenceData:
    """Build the process-wide ReferenceData from the static tables"""
    return ReferenceData(
        home_country=home_country,
        departments=DEPARTMENTS,
        country_coordinates={
            name: Coordinates(**coords) for name, coords in COUNTRY_COORDINATES.items()
        },
        unknown_coordinates=Coordinates(**UNKNOWN_COORDINATES),
    )
