import requests

USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64; rv:85.0) Gecko/20100101 Firefox/85.0"


def requests_session(**headers) -> requests.Session:
    """
    Create a requests Session with a browser User-Agent. Keyword arguments
    are added as extra headers.

    Requests are not retried: a failed request is reported to the caller,
    who decides whether to run the scraper again
    """
    http = requests.Session()
    http.headers.update({"User-Agent": USER_AGENT})
    http.headers.update(headers)

    return http
