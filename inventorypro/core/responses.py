"""
Response envelope shared by every endpoint:

    {"success": true, "data": ..., "message": "..."}
    {"success": false, "message": "...", "error": "..."}
"""
from rest_framework import status
from rest_framework.response import Response


def success_response(data=None, message=None, status_code=status.HTTP_200_OK, **extra):
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    body.update(extra)
    return Response(body, status=status_code)


def error_response(message, status_code=status.HTTP_400_BAD_REQUEST, error=None, **extra):
    body = {'success': False, 'message': message}
    if error is not None:
        body['error'] = error
    body.update(extra)
    return Response(body, status=status_code)
