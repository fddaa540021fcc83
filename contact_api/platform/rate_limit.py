from slowapi import Limiter
from slowapi.util import get_remote_address

from contact_api.platform.config import settings

# In-memory storage resets on restart. Point RATE_LIMIT_STORAGE_URI at
# redis://... when running more than one worker.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.rate_limit_storage_uri,
    strategy="moving-window",
    headers_enabled=True,
)
