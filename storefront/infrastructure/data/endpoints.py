"""REST paths, relative to the API base URL."""

AUTH_TOKEN = "/auth/token"

PRODUCTS = "/products"
PRODUCTS_ACTIVE = "/products/active"
PRODUCTS_SEARCH = "/products/search"

USERS = "/users"

ORDERS = "/orders"

INVENTORY = "/inventory"
INVENTORY_LOW_STOCK = "/inventory/low-stock"


def product_by_id(product_id: object) -> str:
    return f"{PRODUCTS}/{product_id}"


def product_image(product_id: object) -> str:
    return f"{PRODUCTS}/{product_id}/image"


def user_by_id(user_id: object) -> str:
    return f"{USERS}/{user_id}"


def order_by_id(order_id: object) -> str:
    return f"{ORDERS}/{order_id}"


def orders_by_user(user_id: object) -> str:
    return f"{ORDERS}/user/{user_id}"


def orders_by_status(status: object) -> str:
    return f"{ORDERS}/status/{status}"


def order_pay(order_id: object) -> str:
    return f"{ORDERS}/{order_id}/pay"


def inventory_by_product(product_id: object) -> str:
    return f"{INVENTORY}/{product_id}"
