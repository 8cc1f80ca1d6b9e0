#!/usr/bin/env python3
"""OpenAQ Global Air Dashboard."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from airdashboard.data.models import ACTIVITIES, City, Country, HeatmapPoint, HistoricalEntry
from airdashboard.data.provider import AirQualityClient, ProviderError
from airdashboard.services.classifier import (
    CATEGORY_COLORS,
    Pollutant,
    aqi_color,
    classify,
    classify_pollutant,
    describe_pollutant,
    health_message,
    pollutant_ranges_frame,
)
from airdashboard.services.comparison import compare_cities
from airdashboard.services.national import NationalTrendView
from airdashboard.services.summary import summarize, top_polluted
from airdashboard.services.table import SortState, cities_frame, project
from airdashboard.services.trend import select_trend_cities, trend_frame
from airdashboard.utils.config import load_settings
from airdashboard.utils.dates import TimeRange, format_date
from airdashboard.utils.formatting import format_number
from airdashboard.utils.logging import configure_logging

SETTINGS = load_settings()
configure_logging(SETTINGS.log_level)
LOGGER = logging.getLogger(__name__)

SECTIONS = [
    "Overview",
    "City Deep Dive",
    "Map & Sensors",
    "Trends & Comparison",
    "Health & Lifestyle",
    "About",
]

SORTABLE_COLUMNS: Dict[str, str] = {
    "City": "city",
    "AQI": "aqi_index",
    "PM2.5": "pm25",
    "PM10": "pm10",
    "Population": "population",
}

# CO is in ppm, scaled so it is visible next to the ppb gases.
RADAR_SCALE = {Pollutant.CO: 20}

ACTIVITY_LABELS = {
    "walking": "Walking",
    "running": "Running",
    "outdoor_play": "Outdoor Play",
    "cycling": "Cycling",
}


@st.cache_resource(show_spinner=False)
def get_client() -> AirQualityClient:
    return AirQualityClient(SETTINGS)


def tooltip(key: str) -> str:
    info = describe_pollutant(key)
    lines = [f"**{info.name}**", info.description, f"*Why it matters:* {info.why_it_matters}"]
    lines.extend(f"- {text}: {level}" for text, level in info.ranges)
    return "\n\n".join(line for line in lines if line)


def aqi_badge(aqi: int) -> str:
    color = aqi_color(aqi)
    return (
        f"<span style='background-color:{color};color:white;padding:2px 10px;"
        f"border-radius:999px;font-weight:600'>{aqi}</span>"
    )


def build_top_cities_chart(cities: Sequence[City]) -> go.Figure:
    top = top_polluted(cities)
    figure = go.Figure(
        data=[
            go.Bar(
                x=[city.city for city in top],
                y=[city.pm25 for city in top],
                marker_color=[aqi_color(city.aqi_index) for city in top],
                customdata=[city.aqi_index for city in top],
                hovertemplate="%{x}<br>PM2.5 %{y} µg/m³<br>AQI %{customdata}<extra></extra>",
            )
        ]
    )
    figure.update_layout(title="Top 10 Most Polluted Cities", xaxis_tickangle=-45, yaxis_title="PM2.5 (µg/m³)")
    return figure


def build_trend_chart(frame: pd.DataFrame, column: str, title: str, color: str) -> go.Figure:
    figure = go.Figure(
        data=[go.Scatter(x=frame["date"], y=frame[column], mode="lines+markers", line=dict(color=color))]
    )
    figure.update_layout(title=title, xaxis_title="Date", xaxis_tickformat="%b %-d")
    return figure


def build_history_frame(history: Sequence[HistoricalEntry]) -> pd.DataFrame:
    frame = pd.DataFrame([{"date": entry.date, "pm25": entry.pm25, "aqi_index": entry.aqi_index} for entry in history])
    frame["date"] = pd.to_datetime(frame["date"])
    return frame.sort_values("date")


def build_radar_chart(summary: City) -> go.Figure:
    labels = []
    values = []
    for pollutant in Pollutant:
        labels.append(pollutant.label)
        values.append(getattr(summary, pollutant.value) * RADAR_SCALE.get(pollutant, 1))
    figure = go.Figure(
        data=[go.Scatterpolar(r=values + values[:1], theta=labels + labels[:1], fill="toself", name="Current Level")]
    )
    figure.update_layout(title="Pollutant Breakdown", showlegend=False)
    return figure


def build_sensor_map(points: Sequence[HeatmapPoint]) -> go.Figure:
    frame = pd.DataFrame(
        [
            {
                "city": point.city,
                "latitude": point.latitude,
                "longitude": point.longitude,
                "pm25": point.pm25,
                "aqi": point.aqi_index,
                "category": point.aqi_category or classify(point.aqi_index).category.label,
            }
            for point in points
        ]
    )
    figure = px.scatter_mapbox(
        frame,
        lat="latitude",
        lon="longitude",
        color="category",
        color_discrete_map={category.label: color for category, color in CATEGORY_COLORS.items()},
        size="pm25",
        size_max=25,
        hover_name="city",
        hover_data={"aqi": True, "pm25": True, "latitude": ":.4f", "longitude": ":.4f"},
        zoom=4,
        height=550,
    )
    figure.update_layout(
        mapbox_style="carto-positron",
        mapbox_center={"lat": frame["latitude"].mean(), "lon": frame["longitude"].mean()},
        margin=dict(l=0, r=0, t=0, b=0),
    )
    return figure


def render_overview(client: AirQualityClient, country: Country, cities: List[City], time_range: TimeRange) -> None:
    st.subheader(f"Overview - {country.name}")
    stats = summarize(cities)
    if stats is None:
        st.error("No data available")
        return

    cols = st.columns(4)
    cols[0].metric("Average PM2.5", stats.avg_pm25, help="µg/m³ across all cities")
    cols[1].metric("Worst City Today", stats.worst_city, help=f"AQI: {stats.worst_city_aqi}")
    cols[2].metric("Above WHO Guideline", f"{stats.percent_above_who}%", help="Cities exceeding 15 µg/m³")
    cols[3].metric("Total Population", format_number(stats.total_population), help="People affected")

    left, right = st.columns(2)
    with left:
        st.plotly_chart(build_top_cities_chart(cities), use_container_width=True)
        with st.expander("About PM2.5"):
            st.markdown(tooltip("pm25"))
    with right:
        sample = select_trend_cities(cities)
        view: NationalTrendView = st.session_state.setdefault("trend_view", NationalTrendView())
        with st.spinner("Fetching city histories..."):
            points = view.points(client, cities, country.code, time_range.days)
        if points:
            st.plotly_chart(
                build_trend_chart(trend_frame(points), "avg_aqi", "National Average AQI Trend", "#3b82f6"),
                use_container_width=True,
            )
            st.caption(
                f"Mean of {', '.join(sample)}, {format_date(points[0].date)} to {format_date(points[-1].date)}."
            )
        elif points is not None:
            st.info("No historical data available")
        with st.expander("About AQI"):
            st.markdown(tooltip("aqi"))

    st.markdown("#### All Cities")
    search = st.text_input("Search cities...", key="city_search")
    sort_state: SortState = st.session_state.setdefault("sort_state", SortState())
    buttons = st.columns(len(SORTABLE_COLUMNS))
    for col, (label, field) in zip(buttons, SORTABLE_COLUMNS.items()):
        if col.button(f"{label} {sort_state.arrow(field)}".strip(), key=f"sort_{field}"):
            st.session_state["sort_state"] = sort_state.toggle(field)
            st.rerun()
    rows = project(cities, sort_state.key, sort_state.order, search)
    st.dataframe(cities_frame(rows), use_container_width=True, hide_index=True)


def render_deep_dive(client: AirQualityClient, country: Country, city: str, time_range: TimeRange) -> None:
    if not city:
        st.info("Select a city to view detailed analytics")
        return
    try:
        summary = client.city_summary(city, country.code)
        history = client.city_history(city, country.code, time_range.days)
        stations = client.city_stations(city, country.code)
    except ProviderError as exc:
        LOGGER.warning("Deep dive for %s failed: %s", city, exc)
        st.error("Failed to load city data")
        return

    st.subheader(f"{city}, {country.name}")
    header, badge = st.columns([3, 1])
    header.caption(f"Last updated: {summary.last_updated}")
    badge.markdown(f"AQI {aqi_badge(summary.aqi_index)}", unsafe_allow_html=True)
    st.info(health_message(summary.aqi_index))

    left, right = st.columns(2)
    with left:
        st.plotly_chart(build_radar_chart(summary), use_container_width=True)
    with right:
        st.markdown("#### Pollutant Details")
        for pollutant in Pollutant:
            value = getattr(summary, pollutant.value)
            level = classify_pollutant(pollutant, value)
            st.markdown(f"**{pollutant.label}**: {value} {pollutant.unit} ({level.level})", help=tooltip(pollutant.value))

    if history:
        frame = build_history_frame(history)
        left, right = st.columns(2)
        left.plotly_chart(build_trend_chart(frame, "pm25", "PM2.5 Trend", "#3b82f6"), use_container_width=True)
        right.plotly_chart(build_trend_chart(frame, "aqi_index", "AQI Trend", "#f59e0b"), use_container_width=True)

    if stations:
        st.markdown("#### Monitoring Stations")
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Station": station.station_name,
                        "AQI": station.aqi_index,
                        "Category": classify(station.aqi_index).category.label,
                        "PM2.5": station.pm25,
                        "PM10": station.pm10,
                        "NO2": station.no2,
                        "O3": station.o3,
                        "Last Updated": station.last_updated,
                    }
                    for station in stations
                ]
            ),
            use_container_width=True,
            hide_index=True,
        )


def render_map(client: AirQualityClient, country: Country) -> None:
    try:
        points = client.heatmap(country.code)
    except ProviderError as exc:
        LOGGER.warning("Heatmap for %s failed: %s", country.code, exc)
        st.error("Failed to load map data")
        return
    if not points:
        st.error("No sensor data available")
        return
    st.subheader(f"Map & Sensors - {country.name}")
    st.plotly_chart(build_sensor_map(points), use_container_width=True)
    cols = st.columns(3)
    for index, point in enumerate(points):
        with cols[index % 3]:
            st.markdown(
                f"**{point.city}** {aqi_badge(point.aqi_index)}<br>"
                f"<small>{point.latitude:.4f}, {point.longitude:.4f} | PM2.5 {point.pm25} µg/m³</small>",
                unsafe_allow_html=True,
            )
    st.caption(
        "Sensor locations and readings are updated from the OpenAQ network. Each marker represents an "
        "active monitoring station measuring various air pollutants."
    )


def render_trends(client: AirQualityClient, country: Country, cities: List[City], time_range: TimeRange) -> None:
    st.subheader(f"Trends & Comparison - {country.name}")
    names = [""] + [city.city for city in cities]
    left, right = st.columns(2)
    city_a = left.selectbox("City A", names, format_func=lambda name: name or "Select a city")
    city_b = right.selectbox("City B", names, format_func=lambda name: name or "Select a city")
    if not city_a or not city_b:
        st.info("Select two cities to compare their air quality trends")
        return
    try:
        with st.spinner("Fetching city histories..."):
            history_a = client.city_history(city_a, country.code, time_range.days)
            history_b = client.city_history(city_b, country.code, time_range.days)
    except ProviderError as exc:
        LOGGER.warning("Comparison %s vs %s failed: %s", city_a, city_b, exc)
        st.error("Failed to load city history")
        return

    comparison = compare_cities(city_a, history_a, city_b, history_b)
    if comparison is None:
        st.info("No historical data available")
        return
    lower_city = city_b if comparison.higher_city == city_a else city_a
    st.info(
        f"Over the last {time_range.days} days, {comparison.higher_city}'s average PM2.5 is "
        f"{comparison.percent_diff:.1f}% higher than {lower_city}."
    )
    cols = st.columns(2)
    cols[0].metric(f"{city_a} avg PM2.5", f"{comparison.avg_pm25_a:.1f} µg/m³")
    cols[1].metric(f"{city_b} avg PM2.5", f"{comparison.avg_pm25_b:.1f} µg/m³")

    frame = comparison.to_frame()
    for metric in ("PM2.5", "AQI"):
        columns = [f"{city_a} {metric}", f"{city_b} {metric}"]
        figure = px.line(frame, x="date", y=columns, markers=True, title=f"{metric} Comparison")
        st.plotly_chart(figure, use_container_width=True)


def render_health(client: AirQualityClient, country: Country, city: str) -> None:
    if not city:
        st.info("Select a city to view health insights")
        return
    try:
        insights = client.insights(city, country.code)
    except ProviderError as exc:
        LOGGER.warning("Insights for %s failed: %s", city, exc)
        st.error("Failed to load health insights")
        return

    st.subheader(f"Health & Lifestyle - {city}, {country.name}")
    st.markdown(f"Current AQI {aqi_badge(insights.aqi)} **{insights.category}**", unsafe_allow_html=True)
    st.markdown("#### Health Impact")
    for group, text in insights.health.items():
        st.markdown(f"**{group.title()}**: {text}")
    st.markdown("#### Activity Recommendations")
    cols = st.columns(len(ACTIVITIES))
    for col, key in zip(cols, ACTIVITIES):
        activity = insights.activities[key]
        with col:
            st.markdown(f"**{ACTIVITY_LABELS[key]}** {'🟢 Safe' if activity.safe else '🔴 Unsafe'}")
            st.caption(activity.recommendation)


def render_about() -> None:
    st.subheader("About this dashboard")
    st.markdown(
        "Air quality measurements come from the OpenAQ network via the dashboard API. "
        "Country statistics use every reported city; the national trend averages the "
        "daily histories of the five most populous cities."
    )
    st.markdown("#### Breakpoints")
    st.dataframe(pollutant_ranges_frame(), use_container_width=True, hide_index=True)
    for key in ["aqi"] + [pollutant.value for pollutant in Pollutant]:
        with st.expander(describe_pollutant(key).name):
            st.markdown(tooltip(key))


def main() -> None:
    st.set_page_config(page_title="OpenAQ Global Air Dashboard", layout="wide")
    st.title("OpenAQ Global Air Dashboard")
    client = get_client()

    try:
        countries = client.countries()
    except ProviderError as exc:
        LOGGER.error("Unable to load countries: %s", exc)
        st.error("Failed to load countries. Please refresh the page.")
        return

    codes = [country.code for country in countries]
    default_index = codes.index(SETTINGS.default_country) if SETTINGS.default_country in codes else 0
    country_code = st.sidebar.selectbox(
        "Country",
        codes,
        index=default_index,
        format_func=lambda code: next(country.name for country in countries if country.code == code),
    )
    if not country_code:
        st.info("Select a country")
        return
    country = next(country for country in countries if country.code == country_code)
    if st.session_state.get("country_code") != country_code:
        # A new country clears the city selection and the table state.
        st.session_state["country_code"] = country_code
        st.session_state["sort_state"] = SortState()
        st.session_state["selected_city"] = SETTINGS.default_city if country_code == SETTINGS.default_country else ""

    cities_error: Optional[str] = None
    try:
        cities = client.cities(country_code)
    except ProviderError as exc:
        LOGGER.warning("Cities for %s failed: %s", country_code, exc)
        cities_error = "Failed to load overview data"
        cities = []

    city_names = [""] + [city.city for city in cities]
    if st.session_state.get("selected_city") not in city_names:
        st.session_state["selected_city"] = ""
    selected_city = st.sidebar.selectbox(
        "City", city_names, key="selected_city", format_func=lambda name: name or "Select City"
    )
    time_range = st.sidebar.radio(
        "Time range", list(TimeRange), index=2, format_func=lambda value: value.label, horizontal=True
    )
    section = st.sidebar.radio("Section", SECTIONS)
    if st.sidebar.button("Refresh data"):
        client.cache.invalidate()
        st.session_state.pop("trend_view", None)
        st.rerun()

    if cities_error and section in ("Overview", "Trends & Comparison"):
        st.error(cities_error)
    elif section == "Overview":
        render_overview(client, country, cities, time_range)
    elif section == "City Deep Dive":
        render_deep_dive(client, country, selected_city, time_range)
    elif section == "Map & Sensors":
        render_map(client, country)
    elif section == "Trends & Comparison":
        render_trends(client, country, cities, time_range)
    elif section == "Health & Lifestyle":
        render_health(client, country, selected_city)
    else:
        render_about()

    st.sidebar.markdown("---")
    st.sidebar.markdown("Data: **OpenAQ** ground monitoring network.")


if __name__ == "__main__":
    main()
