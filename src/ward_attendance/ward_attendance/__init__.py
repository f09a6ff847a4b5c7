"""Ward field-worker attendance package.

Organized by feature modules (geo, organization, attendance) with a thin
Flask controller layer on top of service/repository layers.
"""
