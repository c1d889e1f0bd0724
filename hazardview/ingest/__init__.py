"""
Data acquisition from remote collaborators.

• weather.EdgeWeatherProvider   – wind / temperature at a point
• chemicals.ChemicalCatalog     – selectable chemicals + hazard types
"""
from .weather import EdgeWeatherProvider, StaticWeatherProvider, WeatherProvider
from .chemicals import ChemicalCatalog

__all__ = ["EdgeWeatherProvider", "StaticWeatherProvider", "WeatherProvider",
           "ChemicalCatalog"]
