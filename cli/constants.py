from __future__ import annotations

import os

STATE_DIR = ".crm"
SECRETS_FILE = os.path.join(STATE_DIR, "secrets.toml")
SECRETS_SOURCE = "hubspot"

# env vars checked before the secrets file
ENV_API_KEY = "HUBSPOT_API_KEY"
ENV_OAUTH_TOKEN = "HUBSPOT_OAUTH_TOKEN"

# rows shown from an artifact after get/search
PREVIEW_ROWS = 10
