"""Default values for the provider endpoints and UI behaviour."""

DEFAULT_BASE_URL = "https://api.openweathermap.org"
DEFAULT_CITY = "London"
DEFAULT_DEBOUNCE_MS = 300
DEFAULT_RECENT_SEARCHES_KEY = "recentWeatherSearches"
API_KEY_ENV_VAR = "OPENWEATHER_API_KEY"
