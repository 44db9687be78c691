import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from backend.core.exceptions import NotFound, TrackerError
from backend.core.utils import error_response, server_error_response
from .filters import order_stores
from .serializers import StoreCreateSerializer, StorePatchSerializer, StoreSerializer
from .services import create_store, get_store_repository, patch_store, toggle_store_status

logger = logging.getLogger('backend.stores')


@api_view(['GET', 'POST'])
def store_list_create(request):
    """List all stores (?ordering=oldest|newest) or create a new one"""
    repository = get_store_repository()
    try:
        if request.method == 'GET':
            ordering = request.query_params.get('ordering', 'oldest')
            stores = order_stores(repository.list(), ordering)
            return Response(StoreSerializer(stores, many=True).data)

        serializer = StoreCreateSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Rejected store creation: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        store = create_store(repository, serializer.validated_data['name'])
        return Response(StoreSerializer(store).data, status=status.HTTP_201_CREATED)
    except TrackerError as e:
        return error_response(e)


@api_view(['GET', 'PATCH'])
def store_detail(request, store_id):
    """Retrieve a store or partially update its status and notes"""
    repository = get_store_repository()
    try:
        if request.method == 'GET':
            return Response(StoreSerializer(repository.get(store_id)).data)

        serializer = StorePatchSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Rejected patch of store {store_id}: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        store = patch_store(repository, store_id, **serializer.validated_data)
        return Response(StoreSerializer(store).data)
    except TrackerError as e:
        if isinstance(e, NotFound):
            logger.warning(f"Patch for unknown store {store_id}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error updating store {store_id}: {str(e)}", exc_info=True)
        return server_error_response()


@api_view(['POST'])
def store_toggle(request, store_id):
    """Flip a store between in-progress and completed"""
    repository = get_store_repository()
    try:
        store = toggle_store_status(repository, repository.get(store_id))
    except TrackerError as e:
        return error_response(e)
    return Response(StoreSerializer(store).data)
