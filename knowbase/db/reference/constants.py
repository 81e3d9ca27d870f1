from knowbase.db.reference.schemas import Brand, Group

FALLBACK_BRANDS = [
    Brand(brand_id="ALL", name="全社共通", sort_order=0),
    Brand(brand_id="FIT365", name="FIT365", sort_order=1),
    Brand(brand_id="JOYFIT", name="JOYFIT", sort_order=2),
    Brand(brand_id="JOYFIT24", name="JOYFIT24", sort_order=3),
]

FALLBACK_GROUPS = [
    Group(group_id="direct", name="直営", sort_order=10),
    Group(group_id="franchise", name="加盟店", sort_order=20),
    Group(group_id="admin_attr", name="管理者", sort_order=90),
]
