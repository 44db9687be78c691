import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.exceptions import ParseError
from rest_framework.response import Response

from backend.core.exceptions import ImportFormatError, TrackerError, ValidationError
from backend.core.utils import error_response, server_error_response
from .filters import derive_view, summarize
from .serializers import AdjustQuantitySerializer, SupplyFormSerializer, SupplySerializer
from .services import (
    add_supply, adjust_quantity, clear_supplies, delete_supply, export_supplies,
    get_supply_repository, import_supplies, update_supply,
)

logger = logging.getLogger('backend.supplies')


@api_view(['GET', 'POST'])
def supply_list_create(request):
    """
    GET: derived supply list (?search=, ?filter=all|low|ok, ?sort=name|quantity|status)
    POST: add a supply from the form fields
    """
    repository = get_supply_repository()

    if request.method == 'GET':
        search = request.query_params.get('search', '')
        filter_mode = request.query_params.get('filter', 'all')
        sort_mode = request.query_params.get('sort', settings.TRACKER_DEFAULT_SORT) or None
        try:
            supplies = derive_view(repository.list(), search, filter_mode, sort_mode)
        except ValidationError as e:
            return error_response(e)
        serializer = SupplySerializer(supplies, many=True)
        return Response(serializer.data)

    serializer = SupplyFormSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Rejected supply form: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    supply = add_supply(repository, **serializer.validated_data)
    return Response(SupplySerializer(supply).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def supply_detail(request, supply_id):
    """Retrieve, edit or delete a supply"""
    repository = get_supply_repository()
    try:
        if request.method == 'GET':
            supply = repository.get(supply_id)
            return Response(SupplySerializer(supply).data)

        if request.method == 'DELETE':
            delete_supply(repository, supply_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = SupplyFormSerializer(data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            logger.warning(f"Rejected edit of supply {supply_id}: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        supply = update_supply(repository, supply_id, **serializer.validated_data)
        if supply is None:
            # Unknown id with strict missing-id handling turned off
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(SupplySerializer(supply).data)
    except TrackerError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error handling supply {supply_id}: {str(e)}", exc_info=True)
        return server_error_response()


@api_view(['POST'])
def supply_adjust(request, supply_id):
    """Change the quantity by ``delta`` (never below zero)"""
    serializer = AdjustQuantitySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        supply = adjust_quantity(get_supply_repository(), supply_id, serializer.validated_data['delta'])
    except TrackerError as e:
        return error_response(e)
    if supply is None:
        return Response(status=status.HTTP_204_NO_CONTENT)
    return Response(SupplySerializer(supply).data)


@api_view(['GET'])
def supply_summary(request):
    """Total, low stock and adequate counts"""
    return Response(summarize(get_supply_repository().list()))


@api_view(['GET'])
def supply_export(request):
    """Download the whole collection as a JSON document"""
    document = export_supplies(get_supply_repository())
    filename = f"supplies-{timezone.now().date().isoformat()}.json"
    logger.info(f"Exporting {len(document['supplies'])} supplies as {filename}")
    return Response(document, headers={'Content-Disposition': f'attachment; filename="{filename}"'})


@api_view(['POST'])
def supply_import(request):
    """
    Replace the collection with an uploaded document (multipart ``file``) or
    a JSON body shaped ``{"supplies": [...]}``.
    """
    message_ttl = settings.TRACKER_STATUS_MESSAGE_TTL
    try:
        upload = request.FILES.get('file')
        raw = upload.read() if upload is not None else request.data
        imported = import_supplies(get_supply_repository(), raw)
    except ParseError as e:
        logger.warning(f"Import rejected, unparseable body: {str(e)}")
        return Response(
            {'error': 'Invalid file format', 'details': str(e), 'message_ttl': message_ttl},
            status=status.HTTP_400_BAD_REQUEST,
        )
    except ImportFormatError as e:
        return Response(
            {'error': 'Invalid file format', 'details': e.message, 'message_ttl': message_ttl},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return Response({
        'message': f'Imported {len(imported)} supplies',
        'count': len(imported),
        'message_ttl': message_ttl,
    })


@api_view(['POST'])
def supply_clear(request):
    """Delete every supply"""
    clear_supplies(get_supply_repository())
    return Response(status=status.HTTP_204_NO_CONTENT)
