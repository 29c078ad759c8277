"""Change feed topics, one per watched source table."""

PREFIX = "zelda.public.shopping_"

PRODUCT = f"{PREFIX}product"
PRODUCT_ICON_SET = f"{PREFIX}product_icon_set"
PRODUCT_IMAGE_SET = f"{PREFIX}product_image_set"
PRODUCT_GUIDE_IMAGE = f"{PREFIX}productguideimage"
PRODUCT_VARIANT = f"{PREFIX}productvariant"
PRODUCT_VARIANT_OPTION_SET = f"{PREFIX}productvariant_option_set"
OPTION = f"{PREFIX}option"
PRODUCT_CATEGORY_SET = f"{PREFIX}product_category_set"
DISPLAY_GROUP_PRODUCT = f"{PREFIX}displaygroupproduct"
PRODUCT_BENEFIT_SET = f"{PREFIX}product_benefit_set"
PRODUCT_RELATED_PRODUCTS = f"{PREFIX}product_related_products"
STOCK = f"{PREFIX}stock"
PRODUCT_BEST_ORDER = f"{PREFIX}productbestorder"

CATEGORY = f"{PREFIX}category"

SELLER = f"{PREFIX}seller"
SELLER_STAT = f"{PREFIX}sellerstat"

LIKE = f"{PREFIX}like"
