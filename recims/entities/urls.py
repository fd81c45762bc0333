from django.urls import path
from .views import entity_list_create, entity_detail

urlpatterns = [
    path('entities/<str:entity>/', entity_list_create, name='entity-list-create'),
    path('entities/<str:entity>/<int:pk>/', entity_detail, name='entity-detail'),
]
