from django.urls import path
from . import views

urlpatterns = [
    # Health check
    path("", views.health, name="health"),

    # Call push
    # Note: Device tokens are stored by app directly in Firestore users/{uid}
    path("api/send-call", views.send_call, name="send_call"),
]
