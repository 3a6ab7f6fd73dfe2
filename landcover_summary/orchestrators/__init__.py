"""Pipeline orchestration.

Runs the stages end to end:
1. Load vector features, raster grid and code lookup
2. Select the boundary and align it to the raster CRS
3. Clip → summarize → resolve codes
"""
