"""Media types and placeholder values shared across the package."""

# Allegro REST media types
PUBLIC_V1 = "application/vnd.allegro.public.v1+json"
PUBLIC_V2 = "application/vnd.allegro.public.v2+json"
BETA_V1 = "application/vnd.allegro.beta.v1+json"
JSON = "application/json"

# Audit placeholders
UNKNOWN_METHOD = "UNKNOWN_METHOD"
NO_STATUS = "NO_STATUS"

# JWT claim holding the seller/user identifier
USER_ID_CLAIM = "user_name"
