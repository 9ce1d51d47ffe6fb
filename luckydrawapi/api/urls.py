from django.urls import include, path, re_path
from rest_framework import routers
from .views import (
    AddParticipantView,
    CycleView,
    GetParticipantsView,
    LoginView,
    LogoutView,
    ParticipantViewSet,
    SessionView,
    SetWinnerView,
)
from draw.views import DrawViewSet, ResetView, SlotStateView, TriggerView, WinnerArchiveViewSet
from guestlink.views import GuestLinkDetailView, GuestLinkListView, GuestLinkQRCodeView, GuestValidateView

router = routers.DefaultRouter()
router.register('participants', ParticipantViewSet)
router.register('draws', DrawViewSet)
router.register('winners', WinnerArchiveViewSet)

app_name = 'api'
urlpatterns = [
    path('draws/state', SlotStateView.as_view()),
    path('draws/trigger', TriggerView.as_view()),
    path('draws/reset', ResetView.as_view()),
    path('', include(router.urls)),
    re_path(r'^cycles/?$', CycleView.as_view()),
    path('login', LoginView.as_view()),
    path('logout', LogoutView.as_view()),
    path('session', SessionView.as_view()),
    path('guest/links', GuestLinkListView.as_view()),
    path('guest/links/<str:token>', GuestLinkDetailView.as_view()),
    path('guest/links/<str:token>/qrcode', GuestLinkQRCodeView.as_view()),
    path('guest/validate', GuestValidateView.as_view()),
    path('functions/get-participants', GetParticipantsView.as_view()),
    path('functions/add-participant', AddParticipantView.as_view()),
    path('functions/set-winner', SetWinnerView.as_view()),
]
