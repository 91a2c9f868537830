# tools/geocoding_api.py

import requests

def format_coordinates(latitude: float, longitude: float) -> str:
    """Renders a position the way field records store it: 'lat, lon' with 6 decimals."""
    return f"{latitude:.6f}, {longitude:.6f}"

def get_coordinates_for_location(location_query: str) -> dict:
    """
    Fetches the latitude and longitude for a given location query (e.g., "Chennai, India").
    Returns a dictionary with 'latitude', 'longitude' and a 'location' string ready for a
    field record, or an 'error' message.
    """
    print(f"---TOOL: Geocoding for '{location_query}'---")
    # Using Nominatim (OpenStreetMap) - no API key needed, but be mindful of usage limits.
    url = "https://nominatim.openstreetmap.org/search"
    params = {'q': location_query, 'format': 'json', 'limit': 1}
    headers = {'User-Agent': 'FieldDataAssistant/1.0'} # Nominatim requires a user-agent

    try:
        response = requests.get(url, params=params, headers=headers, timeout=10)
        response.raise_for_status()
        data = response.json()

        if data:
            lat = float(data[0]['lat'])
            lon = float(data[0]['lon'])
            return {"latitude": lat, "longitude": lon, "location": format_coordinates(lat, lon)}
        else:
            return {"error": "Location not found."}

    except requests.exceptions.RequestException as e:
        return {"error": f"API request failed: {e}"}
    except (KeyError, IndexError, TypeError, ValueError) as e:
        return {"error": f"Error parsing geocoding data: {e}"}
