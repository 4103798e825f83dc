"""
Core package: time, coordinates, units, reference frames and pole rotation.
Import from the submodules (core.astro_time, core.frames, core.rotation, ...).
"""
