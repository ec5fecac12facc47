#!/usr/bin/env python3
"""Convenience runner for the route export tool.

Usage:
    python run.py trip.geojson --format all
"""
from route_kinematics.main import main

if __name__ == "__main__":
    raise SystemExit(main())
