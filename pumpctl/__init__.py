"""Control of two syringe pumps and a conductivity meter: gradient protocols, serial framing, a console and a command shell."""

__version__ = "0.5.0"