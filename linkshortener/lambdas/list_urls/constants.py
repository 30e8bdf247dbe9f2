# Event / error codes reported in logs and response bodies
MISSING_USER_ID = 'MISSING_USER_ID'
LIST_SUCCESS = 'LIST_SUCCESS'
