"""Sample analysis responses shared by the tests."""

from datetime import date

from field_mon.data.analysis_api import parse_analysis_layer
from field_mon.analysis.layer_kinds import GROWTH, WATER_UPTAKE, SOIL_MOISTURE, PEST

# 10 m grid in Satara district (~0.00009 deg spacing)
ORIGIN = (74.9155, 17.8428)
SPACING = 0.00009


def pixel(col, row):
    return [round(ORIGIN[0] + col * SPACING, 6), round(ORIGIN[1] + row * SPACING, 6)]


BOUNDARY_RING = [
    [74.9150, 17.8420],
    [74.9170, 17.8420],
    [74.9170, 17.8440],
    [74.9150, 17.8440],
    [74.9150, 17.8420],
]

TILE_URL = "https://tiles.example.com/growth/{z}/{x}/{y}.png"


def feature(ring=None, **properties):
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [ring or BOUNDARY_RING]},
        "properties": properties,
    }


def growth_response(healthy=None, weak=None, tile_url=TILE_URL, ring=None, **percentages):
    summary = {
        "weak_pixel_percentage": 10.0,
        "stress_pixel_percentage": 15.4,
        "moderate_pixel_percentage": 9.6,
        "healthy_pixel_percentage": 65.0,
        "weak_pixel_coordinates": weak if weak is not None else [pixel(0, 0)],
        "stress_pixel_coordinates": [pixel(1, 0)],
        "moderate_pixel_coordinates": [pixel(2, 0)],
        "healthy_pixel_coordinates": healthy if healthy is not None else [pixel(3, 0), pixel(4, 0)],
    }
    summary.update(percentages)
    props = {"area_acres": 2.5}
    if tile_url:
        props["tile_url"] = tile_url
    return {"features": [feature(ring, **props)], "pixel_summary": summary}


def water_uptake_response():
    return {
        "features": [feature()],
        "pixel_summary": {
            "deficient_pixel_percentage": 5,
            "less_pixel_percentage": 10,
            "adequat_pixel_percentage": 40.5,
            "excellent_pixel_percentage": 30,
            "excess_pixel_percentage": 14.5,
            "deficient_pixel_coordinates": [pixel(0, 5)],
            "less_pixel_coordinates": [pixel(1, 5)],
            "adequat_pixel_coordinates": [pixel(2, 5)],
            "excellent_pixel_coordinates": [pixel(3, 5)],
            "excess_pixel_coordinates": [pixel(4, 5)],
        },
    }


def soil_moisture_response():
    return {
        "features": [feature()],
        "pixel_summary": {
            "less_pixel_percentage": 12,
            "adequate_pixel_percentage": 30,
            "excellent_pixel_percentage": 20,
            "excess_pixel_percentage": 33.3,
            "shallow_water_pixel_percentage": 4.7,
            "less_pixel_coordinates": [pixel(0, 9)],
            "adequate_pixel_coordinates": [pixel(1, 9)],
            "excellent_pixel_coordinates": [pixel(2, 9)],
            # Shares a pixel with Growth "Healthy"
            "excess_pixel_coordinates": [pixel(3, 0)],
            "shallow_water_pixel_coordinates": [pixel(4, 9)],
        },
    }


def pest_response():
    return {
        "features": [feature()],
        "pixel_summary": {
            "chewing_affected_pixel_percentage": 3.2,
            "sucking_affected_pixel_percentage": 1.5,
            "fungi_affected_pixel_percentage": 0.4,
            "SoilBorn_affected_pixel_percentage": 2.6,
            "chewing_affected_pixel_coordinates": [pixel(7, 7)],
            "sucking_affected_pixel_coordinates": [pixel(8, 7)],
            "fungi_affected_pixel_coordinates": [],
            "SoilBorne_affected_pixel_coordinates": [pixel(9, 7)],
            "total_pixel_count": 1000,
            "chewing_affected_pixel_count": 32,
            "sucking_affected_pixel_count": 15,
            "fungi_affected_pixel_count": 4,
            "SoilBorn_pixel_count": 26,
        },
    }


RESPONSES = {
    GROWTH: growth_response,
    WATER_UPTAKE: water_uptake_response,
    SOIL_MOISTURE: soil_moisture_response,
    PEST: pest_response,
}


def make_layer(kind, data=None, plot_name="P1", end_date=date(2025, 2, 10)):
    if data is None:
        data = RESPONSES[kind]()
    return parse_analysis_layer(kind, plot_name, end_date, data)
