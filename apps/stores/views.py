from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from apps.accounts.permissions import IsAdminOrReadOnly
from .models import Store
from .serializers import StoreSerializer
from .services import delete_store
from .exceptions import StoreInUseError


class StoreViewSet(viewsets.ModelViewSet):
    """
    Stores. Readable by every authenticated user, managed by administrators.

    Store-bound users only see their own store.
    """

    serializer_class = StoreSerializer
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]

    def get_queryset(self):
        queryset = Store.objects.all()
        user = self.request.user
        if not user.has_global_access:
            queryset = queryset.filter(pk=user.store_id)
        return queryset

    def destroy(self, request, *args, **kwargs):
        store = self.get_object()
        try:
            delete_store(store=store)
        except StoreInUseError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)
