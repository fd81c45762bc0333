from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from recims.core.exceptions import RecimsError
from recims.core.tenancy import actor_tenant_id
from .services import UploadError, IntegrationError, save_upload, invoke_llm, send_email


class InvokeLLMSerializer(serializers.Serializer):
    prompt = serializers.CharField()
    response_json_schema = serializers.JSONField(required=False, allow_null=True)
    file_urls = serializers.ListField(child=serializers.CharField(), required=False, allow_empty=True)


class SendEmailSerializer(serializers.Serializer):
    to = serializers.JSONField()
    subject = serializers.CharField(required=False, allow_blank=True, default='')
    body = serializers.CharField(required=False, allow_blank=True, default='')
    from_name = serializers.CharField(required=False, allow_blank=True)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def upload_file(request):
    """Store a multipart ``file`` and return its URL"""
    uploaded = request.FILES.get('file') or request.FILES.get('upload')
    if uploaded is None and request.FILES:
        uploaded = next(iter(request.FILES.values()))
    tenant_id = actor_tenant_id(request.user)
    try:
        path, url = save_upload(uploaded, tenant_id)
    except UploadError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response(
        {'file_url': url, 'file_name': path.rsplit('/', 1)[-1], 'tenant_id': tenant_id},
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoke_llm_view(request):
    serializer = InvokeLLMSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        result = invoke_llm(data['prompt'], data.get('response_json_schema'), data.get('file_urls'))
    except IntegrationError as e:
        return Response({'error': e.message}, status=e.status_code)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def send_email_view(request):
    serializer = SendEmailSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        sent = send_email(data['to'], data['subject'], data['body'])
    except RecimsError as e:
        return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'sent': sent})
