"""Provider configuration schema and field descriptions."""
from terraform_provider_ovh.domain.schema import FieldType, Schema, SchemaField, env_default

DESCRIPTIONS = {
    "endpoint": "The OVH API endpoint to target (ex: \"ovh-eu\").",

    "application_key": "The OVH API Application Key.",

    "application_secret": "The OVH API Application Secret.",
    "consumer_key": "The OVH API Consumer key.",
}

ENDPOINT_ENV_VAR = "OVH_ENDPOINT"
APPLICATION_KEY_ENV_VAR = "OVH_APPLICATION_KEY"
APPLICATION_SECRET_ENV_VAR = "OVH_APPLICATION_SECRET"
CONSUMER_KEY_ENV_VAR = "OVH_CONSUMER_KEY"

PROVIDER_SCHEMA: Schema = {
    "endpoint": SchemaField(
        type=FieldType.STRING,
        required=True,
        default_func=env_default(ENDPOINT_ENV_VAR, None),
        description=DESCRIPTIONS["endpoint"],
    ),
    "application_key": SchemaField(
        type=FieldType.STRING,
        optional=True,
        default_func=env_default(APPLICATION_KEY_ENV_VAR, ""),
        description=DESCRIPTIONS["application_key"],
    ),
    "application_secret": SchemaField(
        type=FieldType.STRING,
        optional=True,
        sensitive=True,
        default_func=env_default(APPLICATION_SECRET_ENV_VAR, ""),
        description=DESCRIPTIONS["application_secret"],
    ),
    "consumer_key": SchemaField(
        type=FieldType.STRING,
        optional=True,
        sensitive=True,
        default_func=env_default(CONSUMER_KEY_ENV_VAR, ""),
        description=DESCRIPTIONS["consumer_key"],
    ),
}
