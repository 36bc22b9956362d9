from .auth import (
    AuthChallenge,
    http_get,
    negotiate,
    parse_challenge,
    request_token,
    token_url,
)
