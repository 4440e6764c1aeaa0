import requests


def new_session() -> requests.Session:
    """Create a new requests session for the DSS REST API.

    No retry adapter is mounted: an extraction is submitted exactly once.
    """
    session = requests.Session()

    # Set default headers
    session.headers.update(
        {
            "User-Agent": "dss-shareholding-extractor/1.0",
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Prefer": "respond-async",
        }
    )

    return session
