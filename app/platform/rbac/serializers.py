from rest_framework import serializers

from .constants import Permission, Role


class PrincipalPermissionsSerializer(serializers.Serializer):
    userId = serializers.CharField()
    role = serializers.ChoiceField(choices=[r.value for r in Role])
    rank = serializers.IntegerField()
    permissions = serializers.ListField(child=serializers.ChoiceField(choices=[p.value for p in Permission]))
    accessAllRecords = serializers.BooleanField()
    assignableRoles = serializers.ListField(child=serializers.CharField())


class PermissionMatrixSerializer(serializers.Serializer):
    hierarchy = serializers.DictField(child=serializers.IntegerField())
    permissions = serializers.DictField(child=serializers.ListField(child=serializers.CharField()))
