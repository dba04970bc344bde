"""spinup - install, build, inject and deploy a web app to a serverless platform."""

__version__ = "0.1.0"
