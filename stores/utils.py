from .exceptions import StoreNotFound
from .models import Store


def get_active_store(slug: str) -> Store:
    """Resolve a public store by slug; unknown and inactive stores look the same."""
    store = Store.objects.filter(slug=slug, is_active=True).first()
    if store is None:
        raise StoreNotFound()
    return store
