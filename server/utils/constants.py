"""
Constants for server utilities

Static reference data for the dashboard: the home country's departments
and map coordinates for the countries diaspora votes come from.
"""

# Haiti's 10 departments (administrative subdivisions)
DEPARTMENTS = (
    "Artibonite",
    "Centre",
    "Grand'Anse",
    "Nippes",
    "Nord",
    "Nord-Est",
    "Nord-Ouest",
    "Ouest",
    "Sud",
    "Sud-Est",
)

# Country name -> map marker position and ISO 3166-1 alpha-2 code
COUNTRY_COORDINATES = {
    "Haiti": {"lat": 18.9712, "lng": -72.2852, "code": "HT"},
    "United States": {"lat": 37.0902, "lng": -95.7129, "code": "US"},
    "Canada": {"lat": 56.1304, "lng": -106.3468, "code": "CA"},
    "France": {"lat": 46.2276, "lng": 2.2137, "code": "FR"},
    "Dominican Republic": {"lat": 18.7357, "lng": -70.1627, "code": "DO"},
    "Brazil": {"lat": -14.2350, "lng": -51.9253, "code": "BR"},
    "Chile": {"lat": -35.6751, "lng": -71.5430, "code": "CL"},
    "Mexico": {"lat": 23.6345, "lng": -102.5528, "code": "MX"},
    "Bahamas": {"lat": 25.0343, "lng": -77.3963, "code": "BS"},
}

UNKNOWN_COORDINATES = {"lat": 0.0, "lng": 0.0, "code": "XX"}

# Grouping placeholders
UNKNOWN_COUNTRY = "Unknown"
UNSPECIFIED_DEPARTMENT = "Non Espesifye"
NO_COUNTRY = "N/A"

# Shown when the home country has no votes yet
NO_HOME_VOTES_MESSAGE = "Pa gen vòt Ayiti ankò"
