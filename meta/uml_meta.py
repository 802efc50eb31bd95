from dataclasses import dataclass

ElementType = str


@dataclass
class UmlMetaModel:
    model_type: ElementType = "uml:Model"
    class_type: ElementType = "uml:Class"
    instance_type: ElementType = "uml:InstanceSpecification"
    association_type: ElementType = "uml:Association"
    package_type: ElementType = "uml:Package"
    dependency_type: ElementType = "uml:Dependency"
    generalization_set_type: ElementType = "uml:GeneralizationSet"

    unlimited_multiplicity: str = "*"

    # OntoUML stereotypes are carried as eAnnotations details
    stereotype_annotation_source: str = "ontouml"
    stereotype_detail_key: str = "stereotype"
