"""Insights dashboard: chart projections, SVG renderers and the data service."""
