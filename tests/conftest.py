import copy

import pytest

from sdkpolicy.core import PolicyGenerator
from sdkpolicy.normalize import normalize_catalogue, normalize_mapping_table


RAW_CATALOGUE = [
    {
        "prefix": "s3",
        "serviceName": "Amazon S3",
        "conditions": [
            {"condition": "s3:prefix", "description": "Filters by key name prefix", "type": "String"},
        ],
        "privileges": [
            {
                "privilege": "GetObject",
                "description": "Grants permission to retrieve objects from Amazon S3",
                "accessLevel": "Read",
                "resourceTypes": [{"resourceType": "object", "conditionKeys": [], "dependentActions": []}],
            },
            {
                "privilege": "PutObject",
                "description": "Grants permission to add an object to a bucket",
                "accessLevel": "Write",
                "resourceTypes": [{"resourceType": "object", "conditionKeys": [], "dependentActions": []}],
            },
            {
                "privilege": "ListBucket",
                "description": "Grants permission to list some or all of the objects in a bucket",
                "accessLevel": "List",
                "resourceTypes": [{"resourceType": "bucket", "conditionKeys": [], "dependentActions": []}],
            },
            {
                "privilege": "ListAllMyBuckets",
                "description": "Grants permission to list all buckets owned by the sender",
                "accessLevel": "List",
                "resourceTypes": [],
            },
            {
                "privilege": "GhostMethod",
                "description": "Named like an SDK method that has a mapping entry",
                "accessLevel": "Read",
                "resourceTypes": [],
            },
        ],
        "resources": [
            {"resource": "bucket", "arn": "arn:${Partition}:s3:::${BucketName}", "conditionKeys": []},
            {"resource": "object", "arn": "arn:${Partition}:s3:::${BucketName}/${ObjectKey}", "conditionKeys": []},
            {"resource": "", "arn": "arn:${Partition}:s3:::${BucketName}/unnamed", "conditionKeys": []},
        ],
    },
    {
        "prefix": "lambda",
        "serviceName": "AWS Lambda",
        "conditions": [],
        "privileges": [
            {
                "privilege": "InvokeFunction",
                "description": "Grants permission to invoke a function",
                "accessLevel": "Write",
                "resourceTypes": [{"resourceType": "function*", "conditionKeys": [], "dependentActions": []}],
            },
        ],
        "resources": [
            {
                "resource": "function",
                "arn": "arn:${Partition}:lambda:${Region}:${Account}:function:${FunctionName}",
                "conditionKeys": [],
            },
        ],
    },
    {
        "prefix": "cognito-idp",
        "serviceName": "Amazon Cognito User Pools",
        "conditions": [],
        "privileges": [
            {
                "privilege": "ListUsers",
                "description": "Grants permission to list users in a user pool",
                "accessLevel": "List",
                "resourceTypes": [{"resourceType": "userpool", "conditionKeys": [], "dependentActions": []}],
            },
        ],
        "resources": [
            {
                "resource": "userpool",
                "arn": "arn:${Partition}:cognito-idp:${Region}:${Account}:userpool/${UserPoolId}",
                "conditionKeys": [],
            },
        ],
    },
]

RAW_MAPPINGS = {
    "sdkServiceMappings": {
        "CognitoIdentityServiceProvider": "cognito-idp",
    },
    "sdkMethodIamMappings": {
        "S3.CopyObject": [
            {
                "action": "s3:GetObject",
                "resourceMappings": {"ObjectKey": {"template": "${CopySourceKey}"}},
            },
            {"action": "s3:PutObject", "resourceMappings": {}},
        ],
        "S3.Upload": [
            {"action": "s3:PutObject", "resourceMappings": {}},
            {"action": "s3:NoSuchPrivilege", "resourceMappings": {}},
        ],
        "S3.GhostMethod": [
            {"action": "s3:DoesNotExist", "resourceMappings": {}},
        ],
        "S3.ListObjectsV2": [
            {"action": "s3:ListBucket", "resourceMappings": {}},
        ],
        "CognitoIdentityServiceProvider.ListUsers": [
            {"action": "cognito-idp:ListUsers", "resourceMappings": {}},
        ],
    },
    "sdkPermissionlessAction": [
        "STS.GetCallerIdentity",
    ],
}


@pytest.fixture
def raw_catalogue():
    return copy.deepcopy(RAW_CATALOGUE)


@pytest.fixture
def raw_mappings():
    return copy.deepcopy(RAW_MAPPINGS)


@pytest.fixture
def catalogue(raw_catalogue):
    return normalize_catalogue(raw_catalogue)


@pytest.fixture
def mappings(raw_mappings):
    return normalize_mapping_table(raw_mappings)


@pytest.fixture
def generator(catalogue, mappings):
    return PolicyGenerator(catalogue, mappings)


@pytest.fixture
def s3(catalogue):
    return catalogue[0]
