"""
Notification serializers.
"""

from rest_framework import serializers

from ats.models import Application


class TeamInviteDataSerializer(serializers.Serializer):
    team_member_id = serializers.IntegerField(min_value=1)


class ApplicationReceivedDataSerializer(serializers.Serializer):
    application_id = serializers.IntegerField(min_value=1)


class StageChangedDataSerializer(ApplicationReceivedDataSerializer):
    from_stage = serializers.ChoiceField(choices=Application.Stage.choices)
    to_stage = serializers.ChoiceField(choices=Application.Stage.choices)
    actor_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class EmailWebhookSerializer(serializers.Serializer):
    """
    Validates the {type, data} body of the email webhook.

    `data` is checked against the serializer registered for `type`, so the
    tasks only ever receive integer ids and known stages.
    """

    TEAM_INVITE = 'team_invite'
    APPLICATION_RECEIVED = 'application_received'
    STAGE_CHANGED = 'stage_changed'

    DATA_SERIALIZERS = {
        TEAM_INVITE: TeamInviteDataSerializer,
        APPLICATION_RECEIVED: ApplicationReceivedDataSerializer,
        STAGE_CHANGED: StageChangedDataSerializer,
    }

    type = serializers.ChoiceField(choices=list(DATA_SERIALIZERS))
    data = serializers.DictField()

    def validate(self, attrs):
        data_serializer = self.DATA_SERIALIZERS[attrs['type']](data=attrs['data'])
        if not data_serializer.is_valid():
            raise serializers.ValidationError({'data': data_serializer.errors})
        attrs['data'] = data_serializer.validated_data
        return attrs
