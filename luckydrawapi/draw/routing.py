from django.urls import re_path

from .consumers import DrawConsumer

websocket_urlpatterns = [
    re_path(r'^/?ws/draw/(?P<cycle_id>[^/]+)/(?P<month>[^/]+)/$', DrawConsumer.as_asgi()),
]
