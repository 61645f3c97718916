"""프로바이더 응답 자산 (로직 없음)"""

# 12KB PNG (시그니처 + 패딩)
PNG_12KB = b"\x89PNG\r\n\x1a\n" + b"\x00" * (12 * 1024 - 8)

SVG_LOGO = b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"><rect width="10" height="10"/></svg>'

BRANDFETCH_BRAND = {
    "name": "Acme",
    "domain": "acme.com",
    "logos": [
        {
            "type": "icon",
            "formats": [
                {"format": "png", "src": "https://cdn.brandfetch.io/acme/icon.png"},
            ],
        },
        {
            "type": "logo",
            "formats": [
                {"format": "jpeg", "src": "https://cdn.brandfetch.io/acme/logo.jpeg"},
                {"format": "svg", "src": "https://cdn.brandfetch.io/acme/logo.svg"},
            ],
        },
    ],
}

BRANDFETCH_BRAND_PNG_ONLY = {
    "domain": "acme.com",
    "logos": [
        {"formats": [{"format": "png", "src": "https://cdn.brandfetch.io/acme/logo.png"}]},
    ],
}

BRANDFETCH_SEARCH = [
    {"name": "Acme", "domain": "acme.com"},
    {"name": "Acme Tools", "domain": "acmetools.com"},
]

WIKITEXT_WITH_LOGO = """
{{Infobox company
| name = Acme Corporation
| logo = [[File:Acme Corporation logo.svg|250px]]
| image = [[File:Acme HQ building.jpg|250px]]
| founded = 1920
}}
"""

WIKITEXT_WITH_LOGOTYPE = """
{{Infobox company
| name = Acme
| logotype = [[File:Acme wordmark.png]]
}}
"""

WIKITEXT_IMAGE_LOGO_ONLY = """
{{Infobox company
| image = [[File:Acme_logo_2020.png|200px]]
}}
"""

WIKITEXT_IMAGE_PHOTO_ONLY = """
{{Infobox company
| image = [[File:Acme Tower at night.jpg|200px]]
}}
"""
