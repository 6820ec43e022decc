"""
User dashboard navigation.

The storefront renders the user sidebar and the /user landing cards from
this structure.
"""

BRAND_NAME = "Agro Koi"
HOME_HREF = "/"

USER_SIDEBAR = [
    {
        "title": "Dashboard",
        "icon": "home",
        "submenu": [
            {"title": "Riwayat Review", "href": "/user/review", "icon": "review"},
        ],
    },
    {
        "title": "Pesan",
        "icon": "list",
        "submenu": [
            {"title": "Riwayat Belanja", "href": "/user/checkout-history", "icon": "checkout"},
        ],
    },
    {
        "title": "Managemen Akun",
        "icon": "user",
        "submenu": [
            {"title": "Informasi Akun", "href": "/user/user-management", "icon": "user-filled"},
            {"title": "Alamat", "href": "/user/address", "icon": "address-card"},
        ],
    },
]

# Landing-page shortcuts on /user
USER_SHORTCUTS = [
    {"title": "Review", "href": "/user/review", "label": "ke Review"},
    {"title": "Riwayat Checkout", "href": "/user/checkout-history", "label": "ke Riwayat"},
    {"title": "Pengaturan User", "href": "/user/user-management", "label": "ke Pengaturan User"},
    {"title": "Alamat", "href": "/user/address", "label": "ke Alamat"},
]


def user_navigation(user_name: str) -> dict:
    """Menu payload for the signed-in user's dashboard."""
    return {
        "brand": BRAND_NAME,
        "greeting": user_name,
        "sidebar": USER_SIDEBAR,
        "shortcuts": USER_SHORTCUTS,
        "backToHome": {"title": "Kembali ke Beranda", "href": HOME_HREF},
    }
