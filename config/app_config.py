import os
from dotenv import load_dotenv

load_dotenv()

# Public site, used to build password-reset redirects and login links
SITE_URL = os.getenv("SITE_URL", "https://oma-hub.com").rstrip("/")

# Hosted auth provider (admin API)
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
IDENTITY_PAGE_SIZE = int(os.getenv("IDENTITY_PAGE_SIZE", 1000))

# JWT issued by the auth provider
JWT_SECRET = os.getenv("JWT_SECRET_KEY", "your-secret-key-here")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# Transactional email
RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
EMAIL_FROM = os.getenv("EMAIL_FROM", "OmaHub <info@oma-hub.com>")

# Outbound HTTP
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 15))

# Onboarding
TEMPORARY_PASSWORD_LENGTH = 12
DEFAULT_PRICE_RANGE = "Contact for pricing"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
