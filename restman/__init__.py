__version__ = "2.0.0"

USER_AGENT = f"RestMan/{__version__} (https://github.com/cadamsdev/restman)"
