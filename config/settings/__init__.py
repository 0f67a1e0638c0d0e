"""Settings package for the SpaceBook project.

`base.py` holds the configuration shared by every environment. `dev.py`,
`prod.py` and `test.py` extend it with environment specific overrides
and are selected through DJANGO_SETTINGS_MODULE.
"""
