"""License template registry and rendering.

Bundled templates ship as YAML inside the package; a user file can add or
override entries. Lookups and renders operate on a plain dict built per
invocation.
"""
