"""flagd evaluation v1 protobuf messages and gRPC stub.

The file descriptor mirrors flagd/evaluation/v1/evaluation.proto for the
unary Resolve* methods and is registered in the default descriptor pool at
import time.
"""

from google.protobuf import (
    descriptor_pb2,
    descriptor_pool,
    message_factory,
    struct_pb2,
)

from flagd_provider.constants import FlagdService

FILE_NAME = "flagd/evaluation/v1/evaluation.proto"
PACKAGE = "flagd.evaluation.v1"
SERVICE_NAME = "Service"

_Field = descriptor_pb2.FieldDescriptorProto
_STRUCT_TYPE = ".google.protobuf.Struct"

# method suffix -> (value field type, value message type)
_VALUE_TYPES = {
    "Boolean": (_Field.TYPE_BOOL, None),
    "String": (_Field.TYPE_STRING, None),
    "Int": (_Field.TYPE_INT64, None),
    "Float": (_Field.TYPE_DOUBLE, None),
    "Object": (_Field.TYPE_MESSAGE, _STRUCT_TYPE),
}


def _add_field(message, name, number, field_type, type_name=None):
    field = message.field.add(
        name=name, number=number, type=field_type, label=_Field.LABEL_OPTIONAL
    )
    if type_name:
        field.type_name = type_name


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=FILE_NAME,
        package=PACKAGE,
        syntax="proto3",
        dependency=[struct_pb2.DESCRIPTOR.name],
    )
    service = file_proto.service.add(name=SERVICE_NAME)
    for suffix, (value_type, value_type_name) in _VALUE_TYPES.items():
        request = file_proto.message_type.add(name=f"Resolve{suffix}Request")
        _add_field(request, "flag_key", 1, _Field.TYPE_STRING)
        _add_field(request, "context", 2, _Field.TYPE_MESSAGE, _STRUCT_TYPE)

        response = file_proto.message_type.add(name=f"Resolve{suffix}Response")
        _add_field(response, "value", 1, value_type, value_type_name)
        _add_field(response, "reason", 2, _Field.TYPE_STRING)
        _add_field(response, "variant", 3, _Field.TYPE_STRING)
        _add_field(response, "metadata", 4, _Field.TYPE_MESSAGE, _STRUCT_TYPE)

        service.method.add(
            name=f"Resolve{suffix}",
            input_type=f".{PACKAGE}.Resolve{suffix}Request",
            output_type=f".{PACKAGE}.Resolve{suffix}Response",
        )
    return file_proto


def _load_file_descriptor():
    pool = descriptor_pool.Default()
    try:
        return pool.FindFileByName(FILE_NAME)
    except KeyError:
        pool.AddSerializedFile(_build_file_descriptor().SerializeToString())
        return pool.FindFileByName(FILE_NAME)


DESCRIPTOR = _load_file_descriptor()


def _message_class(name: str):
    return message_factory.GetMessageClass(DESCRIPTOR.message_types_by_name[name])


ResolveBooleanRequest = _message_class("ResolveBooleanRequest")
ResolveBooleanResponse = _message_class("ResolveBooleanResponse")
ResolveStringRequest = _message_class("ResolveStringRequest")
ResolveStringResponse = _message_class("ResolveStringResponse")
ResolveIntRequest = _message_class("ResolveIntRequest")
ResolveIntResponse = _message_class("ResolveIntResponse")
ResolveFloatRequest = _message_class("ResolveFloatRequest")
ResolveFloatResponse = _message_class("ResolveFloatResponse")
ResolveObjectRequest = _message_class("ResolveObjectRequest")
ResolveObjectResponse = _message_class("ResolveObjectResponse")

# method name -> (request class, response class)
METHODS = {
    FlagdService.RESOLVE_BOOLEAN: (ResolveBooleanRequest, ResolveBooleanResponse),
    FlagdService.RESOLVE_STRING: (ResolveStringRequest, ResolveStringResponse),
    FlagdService.RESOLVE_INT: (ResolveIntRequest, ResolveIntResponse),
    FlagdService.RESOLVE_FLOAT: (ResolveFloatRequest, ResolveFloatResponse),
    FlagdService.RESOLVE_OBJECT: (ResolveObjectRequest, ResolveObjectResponse),
}


class EvaluationStub:
    """Client stub for flagd.evaluation.v1.Service."""

    def __init__(self, channel):
        """Constructor.

        Args:
            channel: A grpc.Channel.
        """
        for method_name, (request_class, response_class) in METHODS.items():
            setattr(
                self,
                method_name,
                channel.unary_unary(
                    f"/{FlagdService.NAME}/{method_name}",
                    request_serializer=request_class.SerializeToString,
                    response_deserializer=response_class.FromString,
                ),
            )
