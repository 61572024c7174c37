"""
HTTP layer of the Task Tracker API.

Routes are grouped by API version (``v1``); each version exposes a
single ``router`` that ``main.create_app`` mounts under ``/api/<version>``.
"""
