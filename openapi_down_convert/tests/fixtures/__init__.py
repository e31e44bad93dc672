"""Test fixtures for openapi-down-convert tests.

Sample OpenAPI 3.1 documents exercising the constructs the converter rewrites.
Tests must deep-copy these before handing them to anything that mutates.
"""

# Minimal OpenAPI 3.1 document
MINIMAL_OPENAPI_31 = {
    'openapi': '3.1.0',
    'info': {'title': 'Minimal API', 'version': '1.0.0'},
    'paths': {},
}

# Schemas with examples, const and refs with siblings at every host location
SCHEMA_SITES_SPEC = {
    'openapi': '3.1.0',
    'info': {'title': 'Schema Sites API', 'version': '1.0.0'},
    'paths': {
        '/items/{itemId}': {
            'parameters': [
                {
                    'name': 'itemId',
                    'in': 'path',
                    'required': True,
                    'schema': {'type': 'string', 'examples': ['item-1', 'item-2']},
                }
            ],
            'get': {
                'operationId': 'getItem',
                'parameters': [
                    {
                        'name': 'format',
                        'in': 'query',
                        'content': {
                            'application/json': {
                                'schema': {'type': 'string', 'const': 'full'}
                            }
                        },
                    }
                ],
                'responses': {
                    '200': {
                        'description': 'An item',
                        'headers': {
                            'X-Rate-Limit': {
                                'schema': {'type': 'integer', 'examples': [100]}
                            }
                        },
                        'content': {
                            'application/json': {
                                'schema': {
                                    '$ref': '#/components/schemas/Item',
                                    'description': 'The item',
                                }
                            }
                        },
                    },
                    'default': {'$ref': '#/components/responses/Error'},
                },
                'callbacks': {
                    'onChange': {
                        '{$request.query.callbackUrl}': {
                            'post': {
                                'requestBody': {
                                    'content': {
                                        'application/json': {
                                            'schema': {
                                                'type': 'object',
                                                'properties': {
                                                    'kind': {'const': 'changed'}
                                                },
                                            }
                                        }
                                    }
                                },
                                'responses': {'204': {'description': 'Received'}},
                            }
                        }
                    }
                },
            },
            'post': {
                'operationId': 'createItem',
                'requestBody': {
                    'content': {
                        'multipart/form-data': {
                            'schema': {
                                'type': 'object',
                                'properties': {'file': {'type': 'string'}},
                            },
                            'encoding': {
                                'file': {
                                    'headers': {
                                        'X-Checksum': {
                                            'schema': {
                                                'type': 'string',
                                                'examples': ['abc123'],
                                            }
                                        }
                                    }
                                }
                            },
                        }
                    }
                },
                'responses': {'201': {'description': 'Created'}},
            },
        }
    },
    'webhooks': {
        'itemCreated': {
            'post': {
                'requestBody': {
                    'content': {
                        'application/json': {
                            'schema': {'type': 'string', 'const': 'created'}
                        }
                    }
                },
                'responses': {'200': {'description': 'OK'}},
            }
        }
    },
    'components': {
        'schemas': {
            'Item': {
                'type': 'object',
                'required': ['id'],
                'properties': {
                    'id': {'type': 'string', 'examples': ['abc']},
                    'status': {'const': 'active'},
                    'tags': {
                        'type': 'array',
                        'items': {'type': 'string', 'examples': ['red', 'blue']},
                    },
                    'owner': {
                        '$ref': '#/components/schemas/Owner',
                        'description': 'Who owns the item',
                    },
                    'metadata': {
                        'type': 'object',
                        'additionalProperties': {'type': 'string', 'const': 'x'},
                    },
                },
                'examples': [{'id': 'abc', 'status': 'active'}],
            },
            'Owner': {
                'allOf': [
                    {'$ref': '#/components/schemas/Person'},
                    {'type': 'object', 'properties': {'role': {'const': 'owner'}}},
                ],
                'not': {'type': 'null', 'examples': [None]},
            },
            'Person': {
                'oneOf': [
                    {'type': 'string', 'examples': ['Ann']},
                    {'anyOf': [{'type': 'integer', 'const': 1}]},
                ]
            },
            'Tree': {
                'type': 'object',
                'properties': {
                    'children': {
                        'type': 'array',
                        'items': {'$ref': '#/components/schemas/Tree'},
                    }
                },
            },
        },
        'responses': {
            'Error': {
                'description': 'An error',
                'content': {
                    'application/json': {
                        'schema': {
                            'type': 'object',
                            'properties': {'code': {'type': 'integer', 'const': 500}},
                        }
                    }
                },
            }
        },
        'parameters': {
            'Limit': {
                'name': 'limit',
                'in': 'query',
                'schema': {'type': 'integer', 'examples': [10]},
            }
        },
        'requestBodies': {
            'ItemBody': {
                'description': 'An item to store',
                'content': {
                    'application/json': {
                        'schema': {
                            '$ref': '#/components/schemas/Item',
                            'summary': 'Item payload',
                        }
                    }
                },
            }
        },
        'headers': {
            'X-Request-Id': {'schema': {'type': 'string', 'examples': ['req-1']}}
        },
        'pathItems': {
            'Health': {
                'get': {
                    'responses': {
                        '200': {
                            'description': 'Healthy',
                            'content': {
                                'application/json': {
                                    'schema': {'type': 'string', 'const': 'ok'}
                                }
                            },
                        }
                    }
                }
            }
        },
        'examples': {
            'ItemExample': {
                '$ref': '#/components/examples/Other',
                'summary': 'An example reference with a sibling',
            }
        },
    },
}

# openIdConnect security scheme referenced by several operations
SECURITY_SPEC = {
    'openapi': '3.1.0',
    'info': {'title': 'Secure API', 'version': '1.0.0'},
    'security': [{'oidc': ['openid']}],
    'paths': {
        '/items': {
            'parameters': [{'name': 'q', 'in': 'query', 'schema': {'type': 'string'}}],
            'get': {
                'operationId': 'listItems',
                'security': [{'oidc': ['read:items']}, {'apiKey': []}],
                'responses': {'200': {'description': 'OK'}},
            },
            'post': {
                'operationId': 'createItem',
                'security': [{'oidc': ['read:items', 'write:items']}],
                'responses': {'201': {'description': 'Created'}},
            },
            'delete': {
                'operationId': 'deleteItems',
                'responses': {'204': {'description': 'Deleted'}},
            },
        }
    },
    'components': {
        'securitySchemes': {
            'oidc': {
                'type': 'openIdConnect',
                'openIdConnectUrl': 'https://issuer.example.com/.well-known/openid-configuration',
            },
            'apiKey': {'type': 'apiKey', 'in': 'header', 'name': 'X-API-Key'},
        }
    },
}
