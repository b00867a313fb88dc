"""HTTP gateway that relays send-email requests to Resend or an SMTP relay.

A browser frontend cannot hold mail credentials or speak SMTP. This service
accepts ``POST /send`` with ``to``, ``subject`` and a ``text`` or ``html``
body and delivers it through the channel chosen by ``MAIL_MODE``:

- ``api``: the Resend transactional-email API
- ``smtp``: a real SMTP relay
- ``ethereal``: an Ethereal disposable test account, returning a preview link

Example:
    Serving the gateway::

        from mail_gateway.api import create_app
        from mail_gateway.config import load_settings

        app = create_app(load_settings())
"""

__version__ = "0.1.0"
