"""Pipeline activity functions.

Each activity performs a single unit of work:
- read_vectors / read_raster / read_codes: load collaborator sources
- select_boundary: pick the clip polygon by attribute
- clip_raster: crop and mask the raster to the polygon
- summarize: count cell values inside the polygon
- resolve_codes: label the counted categories
- write_summary: persist the JSON report
"""
