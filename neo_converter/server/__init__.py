"""HTTP API for building and inspecting .neo files.

WHY: Front-ends and automation (web uploaders, batch scripts) need to
convert ROM sets without a local Python install.

HOW: app.py defines a FastAPI app; models.py holds the pydantic schemas.
Conversions run synchronously in the request handler since the core is
pure in-memory work.
"""
