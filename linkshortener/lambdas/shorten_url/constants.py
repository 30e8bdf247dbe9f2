# Event / error codes reported in logs and response bodies
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
INVALID_URL = 'INVALID_URL'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
