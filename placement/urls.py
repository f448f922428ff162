from django.urls import path
from . import views

app_name = "placement"

urlpatterns = [
    # petite sonde de santé (Nginx / monitoring)
    path("sante", views.sante, name="sante"),

    # remplissage asynchrone : POST pour lancer, GET pour poller
    path("remplir/start", views.remplir_start, name="pl_remplir_start"),
    path("remplir/status/<str:task_id>", views.remplir_status, name="pl_remplir_status"),

    path("revelation", views.revelation, name="pl_revelation"),
    path("recommandation", views.recommandation, name="pl_recommandation"),
]
