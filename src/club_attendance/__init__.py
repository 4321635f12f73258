"""Club attendance package.

Feature modules (geo, activities, attendance, users) with a thin Flask
controller layer over service and repository layers.
"""
